import math

from em_route.domain.entities.geography import Coordinate, Network
from em_route.domain.errors import EmptyNetwork

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance in kilometers."""
    if a == b:
        return 0.0
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = phi2 - phi1
    dlmb = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    h = min(1.0, max(0.0, h))  # rounding can push h just past 1 for antipodes
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def nearest_node(point: Coordinate, network: Network) -> str:
    """Id of the node closest to `point`; ties go to the smallest node id."""
    if not network.node_ids:
        raise EmptyNetwork("network has no nodes")
    best, best_d = None, math.inf
    for nid in network.node_ids:  # ascending id order
        d = distance_km(point, network.node_coord(nid))
        if d < best_d:
            best, best_d = nid, d
    return best
