# io/description.py
"""
Schema for the external node/way description consumed by the network store.

Shape (OSM-like):
    {"nodes": [{"id", "lat", "lon"}], "ways": [{"id", "nodeIds" | "nodes", "tags": {"highway"}}]}
"""

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from em_route.domain.entities.geography import SEGMENT_SEP
from em_route.domain.errors import MalformedDescription

ROAD_TYPES = frozenset(
    {
        "motorway",
        "trunk",
        "primary",
        "secondary",
        "tertiary",
        "residential",
        "service",
        "unclassified",
        "motorway_link",
        "trunk_link",
        "primary_link",
        "secondary_link",
        "tertiary_link",
    }
)


class NodeSpec(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    id: str
    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(
        ge=-180.0, le=180.0, allow_inf_nan=False, validation_alias=AliasChoices("lon", "lng")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        # OSM ids arrive as ints
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("id")
    @classmethod
    def _no_separator(cls, v: str) -> str:
        if SEGMENT_SEP in v:
            raise ValueError(f"node id {v!r} must not contain {SEGMENT_SEP!r}")
        return v


class WaySpec(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    id: str
    node_ids: list[str] = Field(validation_alias=AliasChoices("nodeIds", "node_ids", "nodes"))
    tags: dict[str, Any] = Field(default_factory=dict)  # only `highway` is read

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("node_ids", mode="before")
    @classmethod
    def _refs_to_str(cls, v):
        if isinstance(v, (list, tuple)):
            return [str(x) if isinstance(x, int) and not isinstance(x, bool) else x for x in v]
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return {} if v is None else v

    @property
    def highway(self) -> str | None:
        v = self.tags.get("highway")
        return v if isinstance(v, str) else None

    @property
    def is_road(self) -> bool:
        return self.highway in ROAD_TYPES


class NetworkDescription(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    nodes: list[NodeSpec] = Field(default_factory=list)
    ways: list[WaySpec] = Field(default_factory=list)


def parse_description(raw: NetworkDescription | Mapping) -> NetworkDescription:
    if isinstance(raw, NetworkDescription):
        return raw
    try:
        return NetworkDescription.model_validate(raw)
    except ValidationError as exc:
        raise MalformedDescription(f"invalid network description: {exc}") from exc
