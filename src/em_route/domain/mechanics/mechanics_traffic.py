from collections.abc import Mapping, Sequence

import numpy as np

from em_route.app.protocols import Clock, CongestionGenerator, NetworkSource
from em_route.domain.entities.congestion import CongestionSample
from em_route.sim.clock import MonotonicClock
from em_route.sim.rng import RNGRegistry

# share of segments drawn into each band, and the density range of each band
DEFAULT_SHARES = (0.6, 0.3, 0.1)
BANDS = ((0.0, 0.3), (0.3, 0.7), (0.7, 1.0))


def _normalize_shares(shares) -> np.ndarray:
    w = np.asarray(shares, dtype=float)
    if w.shape != (3,):
        raise ValueError(f"shares must have length 3, got {w.shape[0] if w.ndim else 0}")
    if not np.isfinite(w).all() or (w < 0).any():
        raise ValueError("shares must be finite and non-negative")
    s = w.sum()
    if s <= 0:
        raise ValueError("shares must sum to a positive value")
    return w / s


class SyntheticTrafficGenerator(CongestionGenerator):
    """
    One random density per directed edge of the current network.

    Bands are drawn with `shares` (green/orange/red), then the density is
    uniform inside the band's range. Call N draws from substream N of
    `streams`, so a seeded run replays tick for tick.
    """

    def __init__(
        self,
        *,
        network: NetworkSource,
        streams: RNGRegistry,
        shares=DEFAULT_SHARES,
        clock: Clock | None = None,
        name: str = "congestion",
    ):
        self.network, self.streams, self.name = network, streams, name
        self.calls = 0
        self.clock = clock or MonotonicClock()
        self._p = _normalize_shares(shares)

    def __call__(self) -> list[CongestionSample]:
        rng = self.streams.substream(self.name, self.calls)
        self.calls += 1
        edges = list(self.network.get_network().iter_edges())
        if not edges:
            return []
        observed_at = self.clock.wall()
        bands = rng.choice(3, size=len(edges), p=self._p)
        lo = np.array([BANDS[b][0] for b in bands])
        hi = np.array([BANDS[b][1] for b in bands])
        dens = lo + rng.random(len(edges)) * (hi - lo)
        return [
            CongestionSample(e.segment_id, float(d), observed_at) for e, d in zip(edges, dens)
        ]


class StaticTrafficGenerator(CongestionGenerator):
    """Replays a fixed segment_id -> density table on every tick."""

    def __init__(self, densities: Mapping[str, float], *, clock: Clock | None = None):
        self.densities = dict(densities)
        self.clock = clock or MonotonicClock()

    def __call__(self) -> list[CongestionSample]:
        observed_at = self.clock.wall()
        return [CongestionSample(sid, float(d), observed_at) for sid, d in self.densities.items()]


class SequenceTrafficGenerator(CongestionGenerator):
    """Yields a scripted batch per call, repeating the last one once exhausted."""

    def __init__(self, batches: Sequence[Sequence[CongestionSample]]):
        if not batches:
            raise ValueError("batches must not be empty")
        self.batches = [list(b) for b in batches]
        self.calls = 0

    def __call__(self) -> list[CongestionSample]:
        b = self.batches[min(self.calls, len(self.batches) - 1)]
        self.calls += 1
        return list(b)
