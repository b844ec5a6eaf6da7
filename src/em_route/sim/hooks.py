# sim/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def network_built(self, *, nodes, edges, ms, reason): ...
    def scheduler_started(self, *, interval_ms): ...
    def scheduler_stopped(self, *, ticks): ...
    def refresh_tick(self, *, tick, samples, ms): ...
    def refresh_error(self, *, tick, exc: BaseException): ...
    def route_found(self, *, source, target, distance_km, time_min, expanded, ms): ...
    def route_not_found(self, *, source, target): ...


class NoopHooks:
    def network_built(self, **_):
        pass

    def scheduler_started(self, **_):
        pass

    def scheduler_stopped(self, **_):
        pass

    def refresh_tick(self, **_):
        pass

    def refresh_error(self, **_):
        pass

    def route_found(self, **_):
        pass

    def route_not_found(self, **_):
        pass
