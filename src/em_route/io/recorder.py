# io/recorder.py
import json
import logging
import sys
import threading
from dataclasses import asdict, is_dataclass
from typing import Protocol

log = logging.getLogger("em_route.recorder")


def _as_record(ev) -> dict:
    return asdict(ev) if is_dataclass(ev) else dict(ev)


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    """One JSON object per line. Refresh ticks and route requests write from different threads."""

    def __init__(self, fp=sys.stdout, *, flush: bool = False):
        self.fp, self.flush = fp, flush
        self._lock = threading.Lock()

    def write(self, ev) -> None:
        line = json.dumps(_as_record(ev), default=str) + "\n"
        with self._lock:
            self.fp.write(line)
            if self.flush:
                self.fp.flush()


class MemorySink:
    def __init__(self):
        self.events: list = []
        self._lock = threading.Lock()

    def write(self, ev) -> None:
        with self._lock:
            self.events.append(ev)

    def named(self, name: str) -> list:
        with self._lock:
            return [ev for ev in self.events if ev.name == name]


class Recorder:
    """Fans business events out to sinks; a broken sink is logged and skipped."""

    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failures = 0

    def emit(self, ev) -> None:
        for s in self.sinks:
            try:
                s.write(ev)
            except Exception:
                self.failures += 1
                log.exception("recorder sink %s failed on %s", type(s).__name__, type(ev).__name__)
