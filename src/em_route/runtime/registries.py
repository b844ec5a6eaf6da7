# runtime/registries.py
from collections.abc import Callable, Mapping
from typing import Any

from em_route.app.protocols import CongestionGenerator, TravelTimeModel
from em_route.config.models import (
    GeneratorStaticModel,
    GeneratorSyntheticModel,
    GeneratorUnion,
    NetworkFromPath,
    NetworkFromSample,
    NetworkSourceUnion,
    TravelTimeLevelSpeedsModel,
    TravelTimeMultiplierModel,
    TravelTimeUnion,
)
from em_route.domain.entities.congestion import CongestionLevel
from em_route.domain.mechanics.mechanics_traffic import (
    StaticTrafficGenerator,
    SyntheticTrafficGenerator,
)
from em_route.io.samples import sample_grid_description
from em_route.runtime.resources import load_description_from_path
from em_route.services.travel_time import LevelSpeedTravelTime, MultiplierTravelTime
from em_route.sim.rng import RNGRegistry

GeneratorFactory = Callable[[GeneratorUnion, dict], CongestionGenerator]
TravelTimeFactory = Callable[[TravelTimeUnion, dict], TravelTimeModel]
# a network source yields a zero-arg loader so the store can re-read it on rebuild
NetworkSourceFactory = Callable[[NetworkSourceUnion, dict], Callable[[], Mapping]]

_generator_registry: dict[str, GeneratorFactory] = {}
_travel_time_registry: dict[str, TravelTimeFactory] = {}
_network_source_registry: dict[str, NetworkSourceFactory] = {}


def _make(registry: dict[str, Any], what: str, cfg, deps: dict):
    try:
        factory = registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown {what} kind {cfg.kind!r}") from None
    return factory(cfg, deps)


# ------------------- Congestion generators ---------------------------


def register_generator(kind: str):
    def deco(fn: GeneratorFactory):
        _generator_registry[kind] = fn
        return fn

    return deco


def make_generator(cfg: GeneratorUnion, *, deps: dict) -> CongestionGenerator:
    """
    deps can include:
      - 'network': NetworkSource  # required by the synthetic generator
      - 'clock': Clock
    """
    return _make(_generator_registry, "generator", cfg, deps)


@register_generator("synthetic")
def _make_synthetic(cfg: GeneratorSyntheticModel, deps):
    return SyntheticTrafficGenerator(
        network=deps["network"],
        streams=RNGRegistry(cfg.seed, tag="traffic"),
        shares=cfg.shares,
        clock=deps.get("clock"),
    )


@register_generator("static")
def _make_static(cfg: GeneratorStaticModel, deps):
    return StaticTrafficGenerator(cfg.densities, clock=deps.get("clock"))


# ---------------------- Travel time ----------------------------


def register_travel_time(kind: str):
    def deco(fn: TravelTimeFactory):
        _travel_time_registry[kind] = fn
        return fn

    return deco


def make_travel_time(cfg: TravelTimeUnion, *, deps: dict | None = None) -> TravelTimeModel:
    return _make(_travel_time_registry, "travel_time", cfg, deps or {})


@register_travel_time("multiplier")
def _make_multiplier(cfg: TravelTimeMultiplierModel, deps):
    return MultiplierTravelTime(cfg.speed_kmh)


@register_travel_time("level_speeds")
def _make_level_speeds(cfg: TravelTimeLevelSpeedsModel, deps):
    return LevelSpeedTravelTime(
        {
            CongestionLevel.LOW: cfg.green_kmh,
            CongestionLevel.MEDIUM: cfg.orange_kmh,
            CongestionLevel.HIGH: cfg.red_kmh,
        }
    )


# --------------------- Network sources  ---------------------


def register_network_source(kind: str):
    def deco(fn: NetworkSourceFactory):
        _network_source_registry[kind] = fn
        return fn

    return deco


def make_network_source(
    cfg: NetworkSourceUnion, *, deps: dict | None = None
) -> Callable[[], Mapping]:
    return _make(_network_source_registry, "network source", cfg, deps or {})


@register_network_source("sample")
def _make_sample_source(cfg: NetworkFromSample, deps):
    def load():
        return sample_grid_description(
            grid_size=cfg.grid_size,
            spacing_deg=cfg.spacing_deg,
            base_lat=cfg.base_lat,
            base_lon=cfg.base_lon,
            highway=cfg.highway,
        )

    return load


@register_network_source("path")
def _make_path_source(cfg: NetworkFromPath, deps):
    def load():
        return load_description_from_path(cfg.file, cfg.fmt)

    return load
