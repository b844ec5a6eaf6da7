# domain/entities/route.py
from dataclasses import dataclass

from em_route.domain.entities.congestion import CongestionLevel
from em_route.domain.entities.geography import Coordinate


@dataclass(frozen=True)
class RouteSegment:
    start: Coordinate
    end: Coordinate
    source: str
    target: str
    segment_id: str
    distance_km: float
    multiplier: float = 1.0
    level: CongestionLevel = CongestionLevel.LOW

    @property
    def weighted_km(self) -> float:
        return self.distance_km * self.multiplier


@dataclass(frozen=True)
class Route:
    path: tuple[Coordinate, ...]
    segments: tuple[RouteSegment, ...]
    total_distance_km: float
    estimated_time_min: float

    @property
    def start(self) -> Coordinate:
        return self.path[0]

    @property
    def destination(self) -> Coordinate:
        return self.path[-1]

    def as_dict(self) -> dict:
        return {
            "path": [c.as_dict() for c in self.path],
            "segments": [
                {
                    "start": s.start.as_dict(),
                    "end": s.end.as_dict(),
                    "segmentId": s.segment_id,
                    "distance": s.distance_km,
                    "congestionLevel": s.level.value,
                }
                for s in self.segments
            ],
            "totalDistance": self.total_distance_km,
            "estimatedTime": self.estimated_time_min,
        }
