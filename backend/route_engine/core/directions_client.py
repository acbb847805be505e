"""Async client for the directions provider and shortest-candidate selection."""

import logging
import math
from dataclasses import dataclass, field

import httpx

from route_engine.config import settings
from route_engine.core import polyline
from route_engine.core.errors import (
    InsufficientWaypointsError,
    InvalidWaypointError,
    PolylineError,
    RouteUnavailable,
)
from route_engine.core.network import LatLng, Leg, Waypoint

logger = logging.getLogger(__name__)

DIRECTIONS_PATH = "/maps/api/directions/json"


@dataclass
class BestPath:
    points: list[LatLng]
    legs: list[Leg]
    distance_m: float
    encoded: str = ""
    candidates: int = 1


@dataclass
class RouteCandidate:
    legs: list[Leg] = field(default_factory=list)
    encoded: str = ""

    @property
    def distance_m(self) -> float:
        return sum(leg.distance_m for leg in self.legs)


def _is_number(value) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_waypoints(waypoints: list[Waypoint]) -> None:
    if len(waypoints) < 2:
        raise InsufficientWaypointsError(f"Need at least 2 waypoints, got {len(waypoints)}")
    for i, wp in enumerate(waypoints):
        lat = getattr(wp, "latitude", None)
        lon = getattr(wp, "longitude", None)
        if not (_is_number(lat) and _is_number(lon)):
            raise InvalidWaypointError(f"Waypoint {i} has non-numeric coordinates ({lat!r}, {lon!r})")
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            raise InvalidWaypointError(f"Waypoint {i} is out of range ({lat}, {lon})")


def _fmt(wp: Waypoint) -> str:
    return f"{wp.latitude},{wp.longitude}"


def _parse_leg(item: dict) -> Leg:
    traffic = item.get("duration_in_traffic")
    return Leg(
        distance_m=float(item["distance"]["value"]),
        duration_s=float(item["duration"]["value"]),
        duration_in_traffic_s=float(traffic["value"]) if traffic else None,
    )


def select_shortest(candidates: list[RouteCandidate]) -> RouteCandidate | None:
    """Candidate with the smallest summed leg distance; the first one wins ties.

    Durations are not compared.
    """
    best = None
    for c in candidates:
        if best is None or c.distance_m < best.distance_m:
            best = c
    return best


class DirectionsClient:
    """Requests driving paths through an ordered list of waypoints."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=settings.directions_base_url,
            timeout=settings.directions_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    def build_params(self, waypoints: list[Waypoint]) -> dict[str, str]:
        params = {
            "origin": _fmt(waypoints[0]),
            "destination": _fmt(waypoints[-1]),
            "mode": "driving",
            "alternatives": "true",
            "avoid": settings.directions_avoid,
            "key": settings.directions_api_key,
        }
        intermediate = waypoints[1:-1]
        if intermediate:
            # Stop order is fixed by the route
            params["waypoints"] = "|".join(["optimize:false"] + [_fmt(wp) for wp in intermediate])
        return params

    async def request_best_path(self, waypoints: list[Waypoint]) -> BestPath:
        """Fetch candidates and return the shortest; raises RouteUnavailable on any failure."""
        validate_waypoints(waypoints)
        params = self.build_params(waypoints)

        try:
            resp = await self._client.get(DIRECTIONS_PATH, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Directions request failed with HTTP %d", e.response.status_code)
            raise RouteUnavailable(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Directions request failed: %s", type(e).__name__)
            raise RouteUnavailable(type(e).__name__) from e
        except ValueError as e:
            logger.error("Directions response is not valid JSON")
            raise RouteUnavailable("malformed response") from e

        if not isinstance(data, dict):
            raise RouteUnavailable("malformed response")

        status = data.get("status")
        if status != "OK":
            logger.warning(
                "Directions provider returned status=%s (%s)",
                status, data.get("error_message", ""),
            )
            raise RouteUnavailable(f"provider status {status}")

        expected_legs = len(waypoints) - 1
        candidates = []
        for i, item in enumerate(data.get("routes") or []):
            try:
                legs = [_parse_leg(leg) for leg in item["legs"]]
                encoded = str(item["overview_polyline"]["points"])
                if len(legs) != expected_legs:
                    raise ValueError(f"{len(legs)} legs for {len(waypoints)} waypoints")
                if not encoded:
                    raise ValueError("empty polyline")
                candidates.append(RouteCandidate(legs=legs, encoded=encoded))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed route candidate %d: %r", i, e)
                continue

        best = select_shortest(candidates)
        if best is None:
            logger.warning("Directions provider returned no usable routes")
            raise RouteUnavailable("no usable routes")

        try:
            points = polyline.decode(best.encoded)
        except PolylineError as e:
            logger.error("Failed to decode winning polyline: %s", e)
            raise RouteUnavailable("malformed polyline") from e

        logger.info(
            "Selected route of %.0fm from %d candidate(s), %d path points",
            best.distance_m, len(candidates), len(points),
        )
        return BestPath(
            points=points,
            legs=best.legs,
            distance_m=best.distance_m,
            encoded=best.encoded,
            candidates=len(candidates),
        )

    async def fetch_best_path(self, waypoints: list[Waypoint]) -> BestPath | None:
        """Like request_best_path, but returns None when no route is available.

        Waypoint validation errors still raise: a malformed request is a
        caller bug, not an unavailable route.
        """
        try:
            return await self.request_best_path(waypoints)
        except RouteUnavailable as e:
            logger.warning("Route unavailable: %s", e)
            return None
