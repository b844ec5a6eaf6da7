import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import replace

from em_route.app.protocols import Clock
from em_route.domain.entities.geography import Coordinate, Edge, Network, Node
from em_route.domain.errors import MalformedDescription
from em_route.domain.mechanics.mechanics_geomath import distance_km
from em_route.io.description import NetworkDescription, parse_description
from em_route.io.samples import sample_grid_description
from em_route.sim.clock import MonotonicClock
from em_route.sim.hooks import EngineHooks, NoopHooks

DEFAULT_TTL_S = 3600.0

DescriptionLike = NetworkDescription | Mapping


def build_network(description: DescriptionLike, *, built_at: float = 0.0) -> Network:
    """
    Turn a node/way description into a Network.

    Only ways tagged with an allowed `highway` value are kept. Every consecutive
    pair of points on a kept way yields a forward and a reverse edge.
    """
    desc = parse_description(description)

    nodes: dict[str, Node] = {}
    for n in desc.nodes:
        if n.id in nodes:
            raise MalformedDescription(f"duplicate node id {n.id!r}")
        nodes[n.id] = Node(n.id, Coordinate(n.lat, n.lon))

    adjacency: dict[str, list[Edge]] = {}
    for way in desc.ways:
        if not way.is_road:
            continue
        for ref in way.node_ids:
            if ref not in nodes:
                raise MalformedDescription(f"way {way.id!r} references unknown node {ref!r}")
        for u, v in zip(way.node_ids, way.node_ids[1:]):
            if u == v:
                continue  # repeated point, no segment
            d = distance_km(nodes[u].coord, nodes[v].coord)
            if d <= 0.0:
                raise MalformedDescription(
                    f"way {way.id!r} joins distinct nodes {u!r} and {v!r} at the same location"
                )
            adjacency.setdefault(u, []).append(Edge(u, v, d))
            adjacency.setdefault(v, []).append(Edge(v, u, d))

    return Network(nodes=nodes, adjacency=adjacency, built_at=built_at)


class NetworkStore:
    """
    Owns the current Network and its time-to-live.

    Readers get whatever snapshot is cached; an expired or missing snapshot is
    rebuilt by exactly one caller while the others wait on the lock. A rebuild
    always produces a fresh Network that is swapped in whole.
    """

    def __init__(
        self,
        description: DescriptionLike | None = None,
        *,
        ttl_s: float = DEFAULT_TTL_S,
        clock: Clock | None = None,
        hooks: EngineHooks | None = None,
        loader: Callable[[], Mapping] = sample_grid_description,
    ):
        if ttl_s <= 0:
            raise ValueError(f"ttl_s must be > 0, got {ttl_s}")
        self.ttl_s = ttl_s
        self.clock = clock or MonotonicClock()
        self._hooks = hooks or NoopHooks()
        self._loader = loader
        self._description = None if description is None else parse_description(description)
        self._cached: Network | None = None
        self._lock = threading.Lock()

    @property
    def description(self) -> NetworkDescription | None:
        return self._description

    @property
    def cached(self) -> Network | None:
        return self._cached

    def build(self, description: DescriptionLike) -> Network:
        """Build from `description`, remember it for later rebuilds and cache the result."""
        desc = parse_description(description)
        net = self._build(desc, reason="build")
        with self._lock:
            self._description = desc
            self._cached = net
        return net

    def get_network(self) -> Network:
        net = self._cached
        if self._is_fresh(net):
            return net
        with self._lock:
            net = self._cached
            if self._is_fresh(net):
                return net  # someone else rebuilt while we waited
            desc = self._description
            if desc is None:
                desc = parse_description(self._loader())
            net = self._build(desc, reason="cold" if net is None else "expired")
            self._cached = net
            return net

    def update_edge_weight(self, source: str, target: str, weight: float) -> bool:
        """
        Override the stored congestion weight of edge source->target.

        Test seam only: route search reads the congestion ledger, not this weight.
        """
        if weight < 1.0:
            raise ValueError(f"congestion weight must be >= 1.0, got {weight}")
        with self._lock:
            net = self._cached
            if net is None:
                return False
            edges = net.edges_from(source)
            for i, e in enumerate(edges):
                if e.target == target:
                    break
            else:
                return False
            patched = edges[:i] + (replace(e, congestion_weight=weight),) + edges[i + 1 :]
            adjacency = {**net.adjacency, source: patched}
            self._cached = Network(nodes=net.nodes, adjacency=adjacency, built_at=net.built_at)
            return True

    def invalidate_cache(self) -> None:
        with self._lock:
            self._cached = None

    # --------------- Helpers -----------------------------

    def _is_fresh(self, net: Network | None) -> bool:
        return net is not None and (self.clock.now() - net.built_at) < self.ttl_s

    def _build(self, desc: NetworkDescription, *, reason: str) -> Network:
        t0 = time.perf_counter()
        net = build_network(desc, built_at=self.clock.now())
        self._hooks.network_built(
            nodes=len(net),
            edges=net.edge_count,
            ms=(time.perf_counter() - t0) * 1000,
            reason=reason,
        )
        return net
