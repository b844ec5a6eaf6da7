# em_route/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from em_route.app.protocols import CongestionGenerator
from em_route.config.models import EngineModel
from em_route.domain.mechanics.mechanics_congestion import CongestionLedger
from em_route.domain.mechanics.mechanics_network import NetworkStore
from em_route.domain.mechanics.mechanics_routers import NetworkRouter
from em_route.io.engine_logging import EngineLogging  # JSON logs
from em_route.io.recorder import JsonlSink, Recorder
from em_route.runtime.registries import make_generator, make_network_source, make_travel_time
from em_route.services.hospitals import HospitalDirectory
from em_route.services.routing import RouteService
from em_route.sim.clock import MonotonicClock
from em_route.sim.hooks import EngineHooks, NoopHooks
from em_route.sim.scheduler import RefreshScheduler


@dataclass
class App:
    config: EngineModel
    clock: MonotonicClock
    hooks: EngineHooks
    store: NetworkStore
    ledger: CongestionLedger
    router: NetworkRouter
    routes: RouteService
    scheduler: RefreshScheduler
    generator: CongestionGenerator
    hospitals: HospitalDirectory

    def start(self) -> None:
        self.scheduler.start(self.config.scheduler.interval_ms, self.generator)

    def stop(self) -> None:
        self.scheduler.stop()


def build(
    cfg: EngineModel | Mapping,
    *,
    clock=None,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg)

    # 1) Clock & hooks
    clock = clock or MonotonicClock()
    hooks = (
        EngineLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder if recorder is not None else Recorder(JsonlSink()),
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Network & congestion state
    store = NetworkStore(
        ttl_s=model.network.ttl_s,
        clock=clock,
        hooks=hooks,
        loader=make_network_source(model.network.source),
    )
    ledger = CongestionLedger()

    # 3) Routing
    travel_time = make_travel_time(model.travel_time)
    router = NetworkRouter(travel_time, include_endpoints=model.router.include_endpoints, hooks=hooks)
    routes = RouteService(network=store, ledger=ledger, router=router)

    # 4) Refresh
    generator = make_generator(model.scheduler.generator, deps={"network": store, "clock": clock})
    scheduler = RefreshScheduler(ledger, hooks=hooks)

    hospitals = HospitalDirectory(
        [h.to_entity() for h in model.hospitals.registry],
        emergency_only=model.hospitals.emergency_only,
    )

    app = App(model, clock, hooks, store, ledger, router, routes, scheduler, generator, hospitals)
    if model.scheduler.autostart:
        app.start()
    return app
