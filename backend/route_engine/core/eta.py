"""Per-stop ETAs from provider leg durations or an average-speed estimate."""

import datetime
import logging

from route_engine.core.errors import InputMismatchError
from route_engine.core.geometry import haversine_m
from route_engine.core.network import Leg, TimedWaypoint, Waypoint

logger = logging.getLogger(__name__)

# Typical combi speed on local roads (km/h)
DEFAULT_AVERAGE_SPEED_KMH = 40.0


def build_etas(
    waypoints: list[Waypoint],
    legs: list[Leg],
    now: datetime.datetime,
) -> list[TimedWaypoint]:
    """Annotate waypoints with arrival times.

    The first waypoint arrives at ``now``; each later one adds the leg's
    ``duration_in_traffic`` when the provider reported it, else ``duration``.
    """
    if not waypoints:
        if legs:
            raise InputMismatchError(f"Got {len(legs)} legs for 0 waypoints")
        return []
    if len(legs) != len(waypoints) - 1:
        raise InputMismatchError(
            f"Expected {len(waypoints) - 1} legs for {len(waypoints)} waypoints, got {len(legs)}"
        )

    results = [TimedWaypoint(waypoint=waypoints[0], eta=now)]
    cumulative = 0.0
    for wp, leg in zip(waypoints[1:], legs):
        cumulative += leg.effective_duration_s
        results.append(TimedWaypoint(waypoint=wp, eta=now + datetime.timedelta(seconds=cumulative)))
    return results


def estimate_etas(
    waypoints: list[Waypoint],
    now: datetime.datetime,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> list[TimedWaypoint]:
    """Straight-line ETAs when no provider legs are available.

    Uses great-circle distance between consecutive waypoints at a fixed
    average speed, so it underestimates on winding roads.
    """
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be positive")
    speed_ms = average_speed_kmh / 3.6  # km/h -> m/s

    results = []
    cumulative = 0.0
    prev: Waypoint | None = None
    for wp in waypoints:
        if prev is not None:
            dist = haversine_m((prev.latitude, prev.longitude), (wp.latitude, wp.longitude))
            cumulative += dist / speed_ms
        results.append(TimedWaypoint(waypoint=wp, eta=now + datetime.timedelta(seconds=cumulative)))
        prev = wp
    logger.debug("Estimated %d ETAs at %.1f km/h", len(results), average_speed_kmh)
    return results
