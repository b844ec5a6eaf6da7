# domain/errors.py


class RoutingError(Exception):
    """Base class for every error raised by the routing core."""


class MalformedDescription(RoutingError):
    """The network description could not be turned into a graph."""


class EmptyNetwork(RoutingError):
    """The network has no nodes to snap to."""


class NoPathFound(RoutingError):
    """Destination is not reachable from start (disconnected components)."""

    def __init__(self, source: str, target: str):
        super().__init__(f"no path from {source!r} to {target!r}")
        self.source, self.target = source, target


class InvalidCoordinates(RoutingError, ValueError):
    pass
