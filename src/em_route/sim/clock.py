# sim/clock.py
import threading
import time
from datetime import UTC, datetime, timedelta


def ms(x: float) -> float:
    """Milliseconds to seconds."""
    return x / 1000.0


class MonotonicClock:
    """Process clock: monotonic seconds for ages, UTC wall time for timestamps."""

    def now(self) -> float:
        return time.monotonic()

    def wall(self) -> datetime:
        return datetime.now(UTC)


class ManualClock:
    """Clock that only moves when told to; used to drive TTL expiry in tests."""

    def __init__(self, start: float = 0.0, epoch: datetime | None = None):
        self._t = float(start)
        self.epoch = epoch or datetime(2025, 1, 1, tzinfo=UTC)
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._t

    def wall(self) -> datetime:
        return self.epoch + timedelta(seconds=self._t)

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError(f"time went backwards: {dt}")
        with self._lock:
            self._t += dt
            return self._t
