"""Route search pipeline and per-rider search sessions.

RouteSearch chains the assembler, the directions client and the geometry
helpers. SearchSession adds a generation counter so that when a rider edits
the search while a provider call is in flight, only the newest search's
outcome is kept.
"""

import datetime
import logging
from dataclasses import dataclass

from route_engine.config import settings
from route_engine.core.directions_client import DirectionsClient
from route_engine.core.errors import RouteEngineError
from route_engine.core.eta import build_etas
from route_engine.core.geometry import TrackResult, interpolate, track_position
from route_engine.core.network import Direction, LatLng, TimedWaypoint
from route_engine.core.waypoint_assembler import plan_route

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    route_id: int
    direction: Direction
    stops: list[TimedWaypoint]
    path: list[LatLng]  # interpolated, for rendering and tracking
    distance_m: float


class RouteSearch:
    """One-shot search: names in, timed stops and a renderable path out."""

    def __init__(self, catalog, directions: DirectionsClient) -> None:
        self.catalog = catalog
        self.directions = directions

    async def run(
        self,
        from_name: str,
        to_name: str,
        points_per_segment: int | None = None,
        now: datetime.datetime | None = None,
    ) -> SearchResult:
        plan = plan_route(self.catalog.entities, from_name, to_name)
        best = await self.directions.request_best_path(plan.waypoints)

        if now is None:
            now = datetime.datetime.now(datetime.timezone.utc)
        stops = build_etas(plan.waypoints, best.legs, now)

        if points_per_segment is None:
            points_per_segment = settings.interpolation_points_per_segment
        path = interpolate(best.points, points_per_segment)

        return SearchResult(
            route_id=plan.route_id,
            direction=plan.direction,
            stops=stops,
            path=path,
            distance_m=best.distance_m,
        )


class SearchSession:
    """Search state for one rider connection.

    A new search supersedes, but does not cancel, an in-flight one: when the
    older call returns its outcome is dropped.
    """

    def __init__(self, search: RouteSearch) -> None:
        self._search = search
        self.generation = 0
        self.current: SearchResult | None = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    async def search(self, from_name: str, to_name: str, **kwargs) -> SearchResult | None:
        """Run a search; returns None if a newer search started meanwhile."""
        self.generation += 1
        generation = self.generation
        try:
            result = await self._search.run(from_name, to_name, **kwargs)
        except RouteEngineError:
            if not self.is_current(generation):
                logger.debug("Ignoring failure of superseded search #%d", generation)
                return None
            self.current = None
            raise

        if not self.is_current(generation):
            logger.debug(
                "Discarding stale search #%d (%s -> %s), current is #%d",
                generation, from_name, to_name, self.generation,
            )
            return None
        self.current = result
        return result

    def track(self, location: LatLng) -> TrackResult | None:
        """Rider position on the current path, or None before a successful search."""
        if self.current is None:
            return None
        return track_position(location, self.current.path)
