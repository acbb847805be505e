"""Typed errors raised by the route assembly and tracking pipeline.

Every error is recoverable at the caller boundary; the API layer turns them
into a "search failed, try different stops" response.
"""


class RouteEngineError(Exception):
    """Base class for all route engine failures."""


class NotFoundError(RouteEngineError):
    """A stop or terminal name did not resolve to any known entity."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No stop or terminal named {name!r}")
        self.name = name


class AmbiguousRouteError(RouteEngineError):
    """'From' and 'to' resolved to entities that share no route."""

    def __init__(self, from_name: str, to_name: str) -> None:
        super().__init__(f"{from_name!r} and {to_name!r} are not on a common route")
        self.from_name = from_name
        self.to_name = to_name


class InsufficientWaypointsError(RouteEngineError):
    """Fewer than two waypoints to route between."""


class InvalidWaypointError(RouteEngineError):
    """A waypoint is missing numeric coordinates."""


class RouteUnavailable(RouteEngineError):
    """The directions provider could not produce a path."""


class InputMismatchError(RouteEngineError):
    """Leg count does not match waypoint count."""


class RouteDataError(RouteEngineError):
    """Backend route data breaks an ordering invariant."""


class PolylineError(RouteEngineError, ValueError):
    """An encoded polyline string is truncated or contains invalid characters."""
