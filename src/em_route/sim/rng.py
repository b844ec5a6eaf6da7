# sim/rng.py
import threading
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _word(part: object) -> int:
    if isinstance(part, (int, np.integer)) and not isinstance(part, bool):
        return _u32(int(part))
    return _u32(crc32(str(part).encode("utf-8")))


class RNGRegistry:
    """
    Deterministic numpy Generators keyed by name and optional parts.
    Entropy path: [seed, tag, name, *parts]

    Synthetic traffic asks for one substream per refresh tick, so tick N of
    a seeded run draws the same densities no matter how many ticks ran on
    which thread before it.
    """

    def __init__(self, master_seed: int, *, tag: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.tag = _word(str(tag))
        self._streams: dict[tuple[int, ...], np.random.Generator] = {}
        self._lock = threading.Lock()

    def _entropy(self, name: str, parts: tuple) -> list[int]:
        return [self.master_seed, self.tag, _word(name), *(_word(p) for p in parts)]

    def stream(self, name: str) -> np.random.Generator:
        """Long-lived generator; repeated calls return the same object."""
        key = tuple(self._entropy(name, ()))
        with self._lock:
            gen = self._streams.get(key)
            if gen is None:
                gen = self._streams[key] = self.substream(name)
            return gen

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        """New generator at the start of the (name, *parts) sequence; never cached."""
        ss = np.random.SeedSequence(entropy=self._entropy(name, parts))
        return np.random.Generator(np.random.PCG64(ss))
