# em_route/runtime/resources.py
import json
import pickle

from em_route.domain.errors import MalformedDescription


def load_description_from_path(file: str, fmt: str = "json"):
    """Read a raw node/way description from disk; schema checks happen at build time."""
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as exc:
                raise MalformedDescription(f"{file}: not valid JSON ({exc})") from exc
    if fmt == "pickle":
        with open(file, "rb") as f:
            return pickle.load(f)
    raise ValueError(f"Unsupported description fmt {fmt!r}")
