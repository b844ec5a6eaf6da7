# services/travel_time.py
from collections.abc import Iterable, Mapping

from em_route.app.protocols import TravelTimeModel
from em_route.domain.entities.congestion import CongestionLevel
from em_route.domain.entities.route import RouteSegment

DEFAULT_SPEED_KMH = 60.0


class MultiplierTravelTime(TravelTimeModel):
    """Free-flow speed slowed by each segment's congestion multiplier."""

    def __init__(self, speed_kmh: float = DEFAULT_SPEED_KMH):
        if speed_kmh <= 0:
            raise ValueError(f"speed_kmh must be > 0, got {speed_kmh}")
        self.speed_kmh = speed_kmh

    def minutes(self, segments: Iterable[RouteSegment]) -> float:
        weighted_km = sum(s.weighted_km for s in segments)
        return weighted_km / self.speed_kmh * 60.0


class LevelSpeedTravelTime(TravelTimeModel):
    """Fixed average speed per congestion level (green/orange/red)."""

    DEFAULT_SPEEDS = {
        CongestionLevel.LOW: 60.0,
        CongestionLevel.MEDIUM: 30.0,
        CongestionLevel.HIGH: 15.0,
    }

    def __init__(self, speeds_kmh: Mapping[CongestionLevel, float] | None = None):
        self.speeds = {**self.DEFAULT_SPEEDS, **(speeds_kmh or {})}
        if any(v <= 0 for v in self.speeds.values()):
            raise ValueError("level speeds must be > 0")

    def minutes(self, segments: Iterable[RouteSegment]) -> float:
        hours = sum(s.distance_km / self.speeds[s.level] for s in segments)
        return hours * 60.0
