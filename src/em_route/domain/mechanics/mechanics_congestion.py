import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from em_route.domain.entities.congestion import CongestionLevel, CongestionSample
from em_route.domain.entities.route import Route

LOW_MAX = 0.3  # density < LOW_MAX -> LOW
MEDIUM_MAX = 0.7  # density < MEDIUM_MAX -> MEDIUM, else HIGH

MULTIPLIERS: Mapping[CongestionLevel, float] = MappingProxyType(
    {
        CongestionLevel.LOW: 1.0,
        CongestionLevel.MEDIUM: 1.5,
        CongestionLevel.HIGH: 3.0,
    }
)


def classify(density: float) -> CongestionLevel:
    if density < LOW_MAX:
        return CongestionLevel.LOW
    if density < MEDIUM_MAX:
        return CongestionLevel.MEDIUM
    return CongestionLevel.HIGH


def multiplier_for_level(level: CongestionLevel) -> float:
    return MULTIPLIERS[level]


class LedgerSnapshot:
    """Frozen view of the ledger; one search reads only from one snapshot."""

    def __init__(self, samples: Mapping[str, CongestionSample]):
        self._samples = MappingProxyType(dict(samples))

    def __len__(self) -> int:
        return len(self._samples)

    def snapshot(self) -> "LedgerSnapshot":
        return self

    def __contains__(self, segment_id: str) -> bool:
        return segment_id in self._samples

    def get(self, segment_id: str) -> CongestionSample | None:
        return self._samples.get(segment_id)

    def level_for(self, segment_id: str) -> CongestionLevel:
        s = self._samples.get(segment_id)
        return CongestionLevel.LOW if s is None else classify(s.density)

    def multiplier_for(self, segment_id: str) -> float:
        return multiplier_for_level(self.level_for(segment_id))


class CongestionLedger:
    """
    segment_id -> latest CongestionSample.

    Writes take the lock one key at a time, so a reader sees either the old or
    the new sample for a key, never a mix. Later writes always win, whatever
    their `observed_at`.
    """

    def __init__(self, samples: Iterable[CongestionSample] = ()):
        self._samples: dict[str, CongestionSample] = {}
        self._lock = threading.Lock()
        for s in samples:
            self._samples[s.segment_id] = s

    def __len__(self) -> int:
        return len(self._samples)

    def upsert(self, samples: Iterable[CongestionSample]) -> int:
        n = 0
        for s in samples:
            with self._lock:
                self._samples[s.segment_id] = s
            n += 1
        return n

    def get(self, segment_id: str) -> CongestionSample | None:
        with self._lock:
            return self._samples.get(segment_id)

    def all(self) -> list[CongestionSample]:
        with self._lock:
            return list(self._samples.values())

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(self._samples)

    def level_for(self, segment_id: str) -> CongestionLevel:
        s = self.get(segment_id)
        return CongestionLevel.LOW if s is None else classify(s.density)

    def multiplier_for(self, segment_id: str) -> float:
        return multiplier_for_level(self.level_for(segment_id))

    def levels_for_route(self, route: Route) -> list[CongestionLevel]:
        """Current level of each traversed segment, in path order."""
        return [self.level_for(seg.segment_id) for seg in route.segments]
