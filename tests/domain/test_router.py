# tests/domain/test_router.py
import pytest

from em_route.domain.entities.congestion import CongestionLevel, CongestionSample
from em_route.domain.entities.geography import Coordinate, Network
from em_route.domain.errors import EmptyNetwork, NoPathFound
from em_route.domain.mechanics.mechanics_congestion import CongestionLedger
from em_route.domain.mechanics.mechanics_geomath import distance_km
from em_route.domain.mechanics.mechanics_network import NetworkStore
from em_route.domain.mechanics.mechanics_routers import NetworkRouter
from em_route.services.travel_time import LevelSpeedTravelTime, MultiplierTravelTime
from em_route.sim.clock import ManualClock

A, B, C = Coordinate(0.0, 0.0), Coordinate(0.01, 0.0), Coordinate(0.02, 0.0)


def _jam(ledger, *segment_ids, density=0.9):
    ledger.upsert([CongestionSample(sid, density) for sid in segment_ids])


def test_free_flow_chain(chain):
    d = distance_km(A, B)
    route = NetworkRouter().find_route(A, C, chain, CongestionLedger())
    assert route.path == (A, B, C)
    assert [s.segment_id for s in route.segments] == ["A-B", "B-C"]
    assert route.total_distance_km == pytest.approx(2 * d)
    assert route.estimated_time_min == pytest.approx(2 * d)  # 60 km/h -> 1 min per km
    assert all(s.level is CongestionLevel.LOW for s in route.segments)


def test_congestion_slows_but_does_not_lengthen(chain):
    router = NetworkRouter()
    free = router.find_route(A, C, chain, CongestionLedger())
    ledger = CongestionLedger()
    _jam(ledger, "A-B")
    jammed = router.find_route(A, C, chain, ledger)

    assert jammed.total_distance_km == free.total_distance_km
    assert jammed.estimated_time_min > free.estimated_time_min
    d = distance_km(A, B)
    assert jammed.estimated_time_min == pytest.approx(3 * d + d)
    assert jammed.segments[0].level is CongestionLevel.HIGH
    assert jammed.segments[0].multiplier == 3.0


def test_reverse_direction_sample_does_not_apply(chain):
    ledger = CongestionLedger()
    _jam(ledger, "B-A")
    route = NetworkRouter().find_route(A, C, chain, ledger)
    assert route.segments[0].level is CongestionLevel.LOW


def test_disconnected_components(split, hooks):
    router = NetworkRouter(hooks=hooks)
    with pytest.raises(NoPathFound) as ei:
        router.find_route(Coordinate(0.0, 0.0), Coordinate(1.0, 1.0), split, CongestionLedger())
    assert (ei.value.source, ei.value.target) == ("A", "C")
    assert hooks.calls == [("route_not_found", {"source": "A", "target": "C"})]


def test_empty_network():
    with pytest.raises(EmptyNetwork):
        NetworkRouter().find_route(A, C, Network(nodes={}, adjacency={}), CongestionLedger())


def test_same_node_gives_zero_route(chain):
    route = NetworkRouter().find_route(Coordinate(0.0001, 0.0), A, chain, CongestionLedger())
    assert route.path == (A,)
    assert route.segments == ()
    assert route.total_distance_km == 0
    assert route.estimated_time_min == 0


def test_search_is_repeatable(detour):
    router, ledger = NetworkRouter(), CongestionLedger()
    _jam(ledger, "B-C", density=0.5)
    start, end = Coordinate(0.0, 0.0), Coordinate(0.0, 0.02)
    assert router.find_route(start, end, detour, ledger) == router.find_route(start, end, detour, ledger)


def test_heavy_congestion_takes_the_long_way(detour):
    router = NetworkRouter()
    start, end = Coordinate(0.0, 0.0), Coordinate(0.0, 0.02)
    ledger = CongestionLedger()

    direct = router.find_route(start, end, detour, ledger)
    assert [s.target for s in direct.segments] == ["B", "C"]

    _jam(ledger, "A-B")
    around = router.find_route(start, end, detour, ledger)
    assert [s.target for s in around.segments] == ["D", "C"]
    assert around.total_distance_km > direct.total_distance_km
    assert around.estimated_time_min < 4 * distance_km(start, Coordinate(0.0, 0.01))  # jammed direct road


def test_moderate_congestion_keeps_the_direct_road(detour):
    # 1.5x on one leg still beats the detour
    ledger = CongestionLedger()
    _jam(ledger, "A-B", density=0.5)
    route = NetworkRouter().find_route(Coordinate(0.0, 0.0), Coordinate(0.0, 0.02), detour, ledger)
    assert [s.target for s in route.segments] == ["B", "C"]


def test_edge_weight_override_does_not_steer_the_search(detour_description):
    store = NetworkStore(detour_description, clock=ManualClock())
    store.get_network()
    store.update_edge_weight("A", "B", 3.0)
    ledger = CongestionLedger()
    start, end = Coordinate(0.0, 0.0), Coordinate(0.0, 0.02)

    route = NetworkRouter().find_route(start, end, store.get_network(), ledger)
    assert [s.target for s in route.segments] == ["B", "C"]
    assert [s.multiplier for s in route.segments] == [1.0, 1.0]
    assert [s.level for s in route.segments] == ledger.levels_for_route(route)

    _jam(ledger, "A-B")
    route = NetworkRouter().find_route(start, end, store.get_network(), ledger)
    assert [s.target for s in route.segments] == ["D", "C"]


def test_segment_levels_agree_with_ledger(chain):
    ledger = CongestionLedger()
    _jam(ledger, "B-C", density=0.5)
    route = NetworkRouter().find_route(A, C, chain, ledger)
    assert [s.level for s in route.segments] == ledger.levels_for_route(route)
    assert [s.multiplier for s in route.segments] == [1.0, 1.5]


def test_include_endpoints(chain):
    start, end = Coordinate(-0.001, 0.0005), Coordinate(0.02, 0.0)
    route = NetworkRouter(include_endpoints=True).find_route(start, end, chain, CongestionLedger())
    assert route.path == (start, A, B, C)  # end sits on C, so no duplicate
    assert route.start == start and route.destination == C


def test_level_speed_model(chain):
    ledger = CongestionLedger()
    _jam(ledger, "A-B")
    route = NetworkRouter(LevelSpeedTravelTime()).find_route(A, C, chain, ledger)
    d = distance_km(A, B)
    assert route.estimated_time_min == pytest.approx(d / 15 * 60 + d / 60 * 60)


def test_custom_speed(chain):
    route = NetworkRouter(MultiplierTravelTime(30.0)).find_route(A, C, chain, CongestionLedger())
    assert route.estimated_time_min == pytest.approx(2 * distance_km(A, B) * 2)


def test_route_found_hook_and_dict_shape(chain, hooks):
    route = NetworkRouter(hooks=hooks).find_route(A, C, chain, CongestionLedger())
    (name, kw), = hooks.calls
    assert name == "route_found"
    assert (kw["source"], kw["target"]) == ("A", "C")
    assert kw["expanded"] >= 2

    out = route.as_dict()
    assert out["path"][0] == {"lat": 0.0, "lng": 0.0}
    assert out["segments"][0]["segmentId"] == "A-B"
    assert out["segments"][0]["congestionLevel"] == "green"
    assert out["totalDistance"] == route.total_distance_km
    assert out["estimatedTime"] == route.estimated_time_min

