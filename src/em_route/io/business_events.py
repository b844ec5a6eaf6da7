# em_route/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (not part of the routing path)
@dataclass
class BizEvent:
    run_id: str
    at: str  # ISO-8601 wall time
    name: str  # stable event name


@dataclass
class NetworkBuiltBiz(BizEvent):
    nodes: int
    edges: int
    reason: str


@dataclass
class CongestionRefreshedBiz(BizEvent):
    tick: int
    samples: int


@dataclass
class RouteComputedBiz(BizEvent):
    source: str
    target: str
    distance_km: float
    time_min: float


@dataclass
class RouteNotFoundBiz(BizEvent):
    source: str
    target: str
