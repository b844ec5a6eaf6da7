# io/engine_logging.py
import json
import logging
import sys

from em_route.io.business_events import (
    CongestionRefreshedBiz,
    NetworkBuiltBiz,
    RouteComputedBiz,
    RouteNotFoundBiz,
)
from em_route.io.recorder import Recorder
from em_route.sim.clock import MonotonicClock
from em_route.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    """One JSON object per record; structured fields ride in `record.extra`."""

    def format(self, record: logging.LogRecord) -> str:
        out = {"level": record.levelname, "logger": record.name, "msg": record.getMessage()}
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            out |= fields
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        return json.dumps(out, default=str)


def default_json_logger(name: str = "em_route", level: str = "INFO", stream=None) -> logging.Logger:
    """Attach a JSON stream handler once per logger name, then set the level."""
    logger = logging.getLogger(name)
    if not any(getattr(h, "_em_route_json", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(_JsonFormatter())
        handler._em_route_json = True
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    One place to shape and emit structured logs for the network store, the
    refresh scheduler and route searches. Business events go to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.clock = clock or MonotonicClock()
        self.recorder = recorder
        self.log = logger or default_json_logger(level="DEBUG" if debug else level)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id, "wall": self.clock.wall().isoformat()}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _biz(self, cls, name: str, **fields):
        if self.recorder:
            self.recorder.emit(
                cls(run_id=self.run_id, at=self.clock.wall().isoformat(), name=name, **fields)
            )

    # --------------------------------------------------------

    # network store

    def network_built(self, *, nodes: int, edges: int, ms: float, reason: str):
        self._emit("INFO", "network_built", nodes=nodes, edges=edges, ms=round(ms, 3), reason=reason)
        self._biz(NetworkBuiltBiz, "NetworkBuilt", nodes=nodes, edges=edges, reason=reason)

    # refresh scheduler

    def scheduler_started(self, *, interval_ms: float):
        self._emit("INFO", "scheduler_started", interval_ms=interval_ms)

    def scheduler_stopped(self, *, ticks: int):
        self._emit("INFO", "scheduler_stopped", ticks=ticks)

    def refresh_tick(self, *, tick: int, samples: int, ms: float):
        if self.debug:
            self._emit("DEBUG", "refresh_tick", tick=tick, samples=samples, ms=round(ms, 3))
        self._biz(CongestionRefreshedBiz, "CongestionRefreshed", tick=tick, samples=samples)

    def refresh_error(self, *, tick: int, exc: BaseException):
        self._emit("ERROR", "refresh_error", tick=tick, error=repr(exc))

    # route search

    def route_found(self, *, source, target, distance_km, time_min, expanded, ms):
        if self.debug:
            self._emit(
                "DEBUG",
                "route_found",
                source=source,
                target=target,
                distance_km=distance_km,
                time_min=time_min,
                expanded=expanded,
                ms=round(ms, 3),
            )
        self._biz(
            RouteComputedBiz,
            "RouteComputed",
            source=source,
            target=target,
            distance_km=distance_km,
            time_min=time_min,
        )

    def route_not_found(self, *, source, target):
        self._emit("INFO", "route_not_found", source=source, target=target)
        self._biz(RouteNotFoundBiz, "RouteNotFound", source=source, target=target)
