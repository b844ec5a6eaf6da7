from collections.abc import Mapping
from dataclasses import dataclass, field
from math import isfinite
from types import MappingProxyType

from em_route.domain.errors import InvalidCoordinates


# Core geometry types used by mechanics
@dataclass(frozen=True)
class Coordinate:
    lat: float  # degrees, WGS84
    lon: float

    def __post_init__(self):
        lat, lon = self.lat, self.lon
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in (lat, lon)):
            raise InvalidCoordinates(f"lat and lon must be numbers, got {lat!r}, {lon!r}")
        if not (isfinite(lat) and isfinite(lon)):
            raise InvalidCoordinates(f"lat and lon must be finite, got {lat!r}, {lon!r}")
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinates(f"latitude must be between -90 and 90, got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InvalidCoordinates(f"longitude must be between -180 and 180, got {lon}")
        # one spelling per point, so equal positions compare equal
        if abs(lat) == 90.0:
            object.__setattr__(self, "lon", 0.0)
        elif lon == -180.0:
            object.__setattr__(self, "lon", 180.0)

    @classmethod
    def of(cls, p) -> "Coordinate":
        """Accept a Coordinate, a (lat, lon) pair or a {lat, lng|lon} mapping."""
        if isinstance(p, Coordinate):
            return p
        if isinstance(p, Mapping):
            lon = p.get("lon", p.get("lng"))
            return cls(p.get("lat"), lon)
        lat, lon = p
        return cls(lat, lon)

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lon}


SEGMENT_SEP = "-"  # node ids must not contain it


def segment_id(source: str, target: str) -> str:
    return f"{source}{SEGMENT_SEP}{target}"


@dataclass(frozen=True)
class Node:
    id: str
    coord: Coordinate


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    base_distance_km: float
    congestion_weight: float = 1.0  # informational; searches read the ledger

    @property
    def segment_id(self) -> str:
        return segment_id(self.source, self.target)


@dataclass(frozen=True)
class Network:
    """
    Immutable road graph. Changes are made by building a new Network and
    swapping it in, never by mutating one that readers may hold.
    """

    nodes: Mapping[str, Node]
    adjacency: Mapping[str, tuple[Edge, ...]]
    built_at: float = 0.0
    node_ids: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        # freeze the containers so a shared snapshot cannot be edited in place
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(
            self, "adjacency", MappingProxyType({k: tuple(v) for k, v in self.adjacency.items()})
        )
        object.__setattr__(self, "node_ids", tuple(sorted(self.nodes)))

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(es) for es in self.adjacency.values())

    def node_coord(self, node_id: str) -> Coordinate:
        return self.nodes[node_id].coord

    def edges_from(self, node_id: str) -> tuple[Edge, ...]:
        return self.adjacency.get(node_id, ())

    def iter_edges(self):
        for nid in self.node_ids:
            yield from self.edges_from(nid)

    def edge(self, source: str, target: str) -> Edge | None:
        for e in self.edges_from(source):
            if e.target == target:
                return e
        return None
