# services/routing.py
from em_route.app.protocols import CongestionSource, NetworkSource, RoutePlanner
from em_route.domain.entities.congestion import CongestionLevel
from em_route.domain.entities.geography import Coordinate
from em_route.domain.entities.route import Route
from em_route.domain.errors import (
    EmptyNetwork,
    InvalidCoordinates,
    MalformedDescription,
    NoPathFound,
)

# HTTP status per error type, for whatever web layer sits in front
_STATUS = {
    InvalidCoordinates: 400,
    NoPathFound: 404,
    EmptyNetwork: 500,
    MalformedDescription: 500,
}


def status_for(exc: BaseException) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS:
            return _STATUS[cls]
    return 500


class RouteService:
    """Entry point for route consumers: validate, fetch the live network, search."""

    def __init__(self, *, network: NetworkSource, ledger: CongestionSource, router: RoutePlanner):
        self.network, self.ledger, self.router = network, ledger, router

    def calculate_route(self, start, destination) -> Route:
        start = self._coord(start, "start")
        destination = self._coord(destination, "destination")
        return self.router.find_route(start, destination, self.network.get_network(), self.ledger)

    def recalculate_route(self, route: Route) -> Route:
        """Search again between the route's endpoints against current congestion."""
        if not route.path:
            raise InvalidCoordinates("route has an empty path")
        return self.calculate_route(route.start, route.destination)

    def levels_for_route(self, route: Route) -> list[CongestionLevel]:
        return self.ledger.levels_for_route(route)

    @staticmethod
    def _coord(p, label: str) -> Coordinate:
        if p is None:
            raise InvalidCoordinates(f"Invalid {label} coordinates: coordinates are required")
        try:
            return Coordinate.of(p)
        except InvalidCoordinates as exc:
            raise InvalidCoordinates(f"Invalid {label} coordinates: {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidCoordinates(f"Invalid {label} coordinates: {p!r}") from exc

