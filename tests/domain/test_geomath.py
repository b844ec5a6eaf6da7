# tests/domain/test_geomath.py
import math

import pytest

from em_route.domain.entities.geography import Coordinate, Network, Node
from em_route.domain.errors import EmptyNetwork, InvalidCoordinates
from em_route.domain.mechanics.mechanics_geomath import EARTH_RADIUS_KM, distance_km, nearest_node


def test_distance_to_self_is_zero():
    p = Coordinate(40.7128, -74.006)
    assert distance_km(p, p) == 0.0


def test_one_degree_of_latitude():
    d = distance_km(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    assert d == pytest.approx(EARTH_RADIUS_KM * math.pi / 180, rel=1e-12)


def test_distance_is_symmetric():
    a, b = Coordinate(40.7128, -74.006), Coordinate(40.7580, -73.9855)
    assert distance_km(a, b) == distance_km(b, a)


def test_antipodes_do_not_blow_up():
    d = distance_km(Coordinate(0.0, 0.0), Coordinate(0.0, 180.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_KM)


def test_triangle_inequality_on_a_few_points():
    a, b, c = Coordinate(0, 0), Coordinate(0.5, 0.2), Coordinate(1.0, -0.3)
    assert distance_km(a, c) <= distance_km(a, b) + distance_km(b, c) + 1e-9


@pytest.mark.parametrize(
    "lat, lon",
    [
        (91.0, 0.0),
        (-90.5, 0.0),
        (0.0, 180.5),
        (float("nan"), 0.0),
        (0.0, float("inf")),
        ("1", 2),
        (True, 0.0),
        (0.0, False),
    ],
)
def test_invalid_coordinates_rejected(lat, lon):
    with pytest.raises(InvalidCoordinates):
        Coordinate(lat, lon)


def test_coordinate_of_accepts_pairs_and_mappings():
    assert Coordinate.of((1.0, 2.0)) == Coordinate(1.0, 2.0)
    assert Coordinate.of({"lat": 1.0, "lng": 2.0}) == Coordinate(1.0, 2.0)
    assert Coordinate.of({"lat": 1.0, "lon": 2.0}) == Coordinate(1.0, 2.0)
    with pytest.raises(InvalidCoordinates):
        Coordinate.of({"lat": 1.0})


def test_nearest_node_picks_closest(chain):
    assert nearest_node(Coordinate(0.0101, 0.0002), chain) == "B"
    assert nearest_node(Coordinate(-5.0, 0.0), chain) == "A"


def test_nearest_node_tie_goes_to_smallest_id():
    net = Network(
        nodes={"b": Node("b", Coordinate(0.0, 0.01)), "a": Node("a", Coordinate(0.0, -0.01))},
        adjacency={},
    )
    assert nearest_node(Coordinate(0.0, 0.0), net) == "a"


def test_nearest_node_on_empty_network():
    with pytest.raises(EmptyNetwork):
        nearest_node(Coordinate(0.0, 0.0), Network(nodes={}, adjacency={}))


def test_antimeridian_and_poles_have_one_spelling():
    assert Coordinate(0.0, -180.0) == Coordinate(0.0, 180.0)
    assert Coordinate(90.0, 45.0) == Coordinate(90.0, -120.0)
    assert Coordinate(-90.0, 10.0).lon == 0.0
    assert distance_km(Coordinate(10.0, -180.0), Coordinate(10.0, 180.0)) == 0.0


def test_zero_distance_only_for_equal_points():
    a = Coordinate(0.0, 179.9999)
    b = Coordinate(0.0, -179.9999)
    assert a != b
    assert distance_km(a, b) > 0.0
