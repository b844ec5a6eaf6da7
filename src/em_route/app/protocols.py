from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from em_route.domain.entities.congestion import CongestionLevel, CongestionSample
from em_route.domain.entities.geography import Coordinate, Network
from em_route.domain.entities.route import Route, RouteSegment


# ------------- Time --------------------
@runtime_checkable
class Clock(Protocol):
    """Monotonic seconds for ages and TTLs; UTC wall time for sample timestamps."""

    def now(self) -> float: ...
    def wall(self) -> datetime: ...


# ------------- Congestion --------------------
@runtime_checkable
class CongestionView(Protocol):
    """Read side of congestion; a search only ever sees one of these."""

    def __contains__(self, segment_id: str) -> bool: ...
    def level_for(self, segment_id: str) -> CongestionLevel: ...
    def multiplier_for(self, segment_id: str) -> float: ...


@runtime_checkable
class CongestionSource(Protocol):
    def snapshot(self) -> CongestionView: ...


@runtime_checkable
class CongestionSink(Protocol):
    def upsert(self, samples: Iterable[CongestionSample]) -> int: ...


@runtime_checkable
class CongestionGenerator(Protocol):
    """
    Produces a batch of samples per refresh tick. A live telemetry feed and a
    synthetic generator look the same from the scheduler's side.
    """

    def __call__(self) -> Sequence[CongestionSample]: ...


# ------------- Network --------------------
@runtime_checkable
class NetworkSource(Protocol):
    def get_network(self) -> Network: ...


# ------------- Routing --------------------
@runtime_checkable
class TravelTimeModel(Protocol):
    def minutes(self, segments: Iterable[RouteSegment]) -> float: ...


@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Snap free coordinates to the network.
      • Compute the cheapest path under the congestion read at call time.
    Units: kilometers for distances; minutes for travel time.
    """

    def find_route(
        self,
        start: Coordinate,
        destination: Coordinate,
        network: Network,
        ledger: CongestionSource,
    ) -> Route: ...
