# domain/entities/congestion.py
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from math import isfinite


class CongestionLevel(Enum):
    LOW = "green"
    MEDIUM = "orange"
    HIGH = "red"


@dataclass(frozen=True)
class CongestionSample:
    segment_id: str
    density: float  # 0 = empty road, 1 = jammed
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self):
        if not isfinite(self.density) or not 0.0 <= self.density <= 1.0:
            raise ValueError(f"density must be in [0, 1], got {self.density!r}")
