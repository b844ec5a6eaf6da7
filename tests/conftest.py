# tests/conftest.py
import pytest

from em_route.domain.mechanics.mechanics_network import build_network

STEP = 0.01  # degrees; about 1.11 km of latitude


def describe(nodes, ways):
    return {
        "nodes": [{"id": nid, "lat": lat, "lon": lon} for nid, lat, lon in nodes],
        "ways": [{"id": wid, "nodeIds": refs, "tags": {"highway": hw}} for wid, refs, hw in ways],
    }


class RecordingHooks:
    """Collects every hook call as (name, kwargs)."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []

    def names(self) -> list[str]:
        return [n for n, _ in self.calls]

    def __getattr__(self, name):
        def hook(*args, **kwargs):
            self.calls.append((name, kwargs))

        return hook


@pytest.fixture
def make_description():
    return describe


@pytest.fixture
def hooks():
    return RecordingHooks()


@pytest.fixture
def chain_description():
    # A - B - C along the prime meridian
    return describe(
        [("A", 0.0, 0.0), ("B", STEP, 0.0), ("C", 2 * STEP, 0.0)],
        [("w1", ["A", "B", "C"], "residential")],
    )


@pytest.fixture
def chain(chain_description):
    return build_network(chain_description)


@pytest.fixture
def split():
    # {A, B} and {C, D} share no way
    return build_network(
        describe(
            [("A", 0.0, 0.0), ("B", STEP, 0.0), ("C", 1.0, 1.0), ("D", 1.0 + STEP, 1.0)],
            [("w1", ["A", "B"], "primary"), ("w2", ["C", "D"], "primary")],
        )
    )


@pytest.fixture
def detour_description():
    # straight road A - B - C, plus a longer way round through D
    return describe(
        [("A", 0.0, 0.0), ("B", 0.0, STEP), ("C", 0.0, 2 * STEP), ("D", STEP, STEP)],
        [("direct", ["A", "B", "C"], "primary"), ("around", ["A", "D", "C"], "secondary")],
    )


@pytest.fixture
def detour(detour_description):
    return build_network(detour_description)
