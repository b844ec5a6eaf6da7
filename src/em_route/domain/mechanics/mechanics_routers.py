import heapq
import math
import time
from itertools import count

from em_route.app.protocols import CongestionSource, CongestionView, RoutePlanner, TravelTimeModel
from em_route.domain.entities.geography import Coordinate, Edge, Network
from em_route.domain.entities.route import Route, RouteSegment
from em_route.domain.errors import NoPathFound
from em_route.domain.mechanics.mechanics_congestion import multiplier_for_level
from em_route.domain.mechanics.mechanics_geomath import distance_km, nearest_node
from em_route.services.travel_time import MultiplierTravelTime
from em_route.sim.hooks import EngineHooks, NoopHooks


class NetworkRouter(RoutePlanner):
    """
    A* over the road graph.

    Edge cost is base distance times the congestion multiplier. The heuristic
    is the great-circle distance to the goal, which never overestimates since
    every multiplier is >= 1.
    """

    def __init__(
        self,
        travel_time: TravelTimeModel | None = None,
        *,
        include_endpoints: bool = False,
        hooks: EngineHooks | None = None,
    ):
        self.travel_time = travel_time or MultiplierTravelTime()
        self.include_endpoints = include_endpoints
        self._hooks = hooks or NoopHooks()

    def find_route(
        self,
        start: Coordinate,
        destination: Coordinate,
        network: Network,
        ledger: CongestionSource,
    ) -> Route:
        start, destination = Coordinate.of(start), Coordinate.of(destination)
        source = nearest_node(start, network)
        target = nearest_node(destination, network)
        view = ledger.snapshot()  # one consistent read per search

        t0 = time.perf_counter()
        try:
            edges, expanded = self.astar(network, source, target, view)
        except NoPathFound:
            self._hooks.route_not_found(source=source, target=target)
            raise

        segments = tuple(self._segment(network, e, view) for e in edges)
        path = [network.node_coord(source)] + [s.end for s in segments]
        if self.include_endpoints:
            if start != path[0]:
                path.insert(0, start)
            if destination != path[-1]:
                path.append(destination)

        route = Route(
            path=tuple(path),
            segments=segments,
            total_distance_km=sum(s.distance_km for s in segments),
            estimated_time_min=self.travel_time.minutes(segments),
        )
        self._hooks.route_found(
            source=source,
            target=target,
            distance_km=route.total_distance_km,
            time_min=route.estimated_time_min,
            expanded=expanded,
            ms=(time.perf_counter() - t0) * 1000,
        )
        return route

    def astar(
        self, network: Network, source: str, target: str, view: CongestionView
    ) -> tuple[list[Edge], int]:
        """Return the edges of the cheapest source->target path and the number of expanded nodes."""
        goal = network.node_coord(target)

        def h(n: str) -> float:
            return distance_km(network.node_coord(n), goal)

        seq = count()  # FIFO among equal f
        frontier: list[tuple[float, int, str]] = [(h(source), next(seq), source)]
        g: dict[str, float] = {source: 0.0}
        came_from: dict[str, Edge] = {}
        closed: set[str] = set()

        while frontier:
            _, _, u = heapq.heappop(frontier)
            if u in closed:
                continue  # stale entry
            if u == target:
                return self._reconstruct(came_from, source, target), len(closed)
            closed.add(u)
            gu = g[u]
            for e in network.edges_from(u):
                v = e.target
                if v in closed:
                    continue
                ng = gu + e.base_distance_km * view.multiplier_for(e.segment_id)
                if ng < g.get(v, math.inf):
                    g[v] = ng
                    came_from[v] = e
                    heapq.heappush(frontier, (ng + h(v), next(seq), v))

        raise NoPathFound(source, target)

    # --------------- Helpers -----------------------------

    @staticmethod
    def _reconstruct(came_from: dict[str, Edge], source: str, target: str) -> list[Edge]:
        edges: list[Edge] = []
        n = target
        while n != source:
            e = came_from[n]
            edges.append(e)
            n = e.source
        edges.reverse()
        return edges

    def _segment(self, network: Network, e: Edge, view: CongestionView) -> RouteSegment:
        level = view.level_for(e.segment_id)
        return RouteSegment(
            start=network.node_coord(e.source),
            end=network.node_coord(e.target),
            source=e.source,
            target=e.target,
            segment_id=e.segment_id,
            distance_km=e.base_distance_km,
            multiplier=multiplier_for_level(level),
            level=level,
        )
