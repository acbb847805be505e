"""Path densification and rider position tracking.

Latitude/longitude are treated as planar for interpolation and projection,
which is accurate enough at city scale. Distances reported to callers are
great-circle metres.
"""

import logging
import math
from dataclasses import dataclass

from shapely.geometry import LineString, Point

from route_engine.core.network import LatLng

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000
# Distances closer than this count as a tie
TIE_TOLERANCE_M = 1e-6


def haversine_m(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in meters between two (lat, lon) points."""
    lat1, lon1 = a
    lat2, lon2 = b
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    h = (math.sin(dlat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlon / 2) ** 2)
    return EARTH_RADIUS_M * 2 * math.asin(math.sqrt(min(1.0, h)))


def interpolate(path: list[LatLng], points_per_segment: int) -> list[LatLng]:
    """Insert evenly spaced linear samples between consecutive path points.

    Each segment contributes ``points_per_segment`` samples starting at its
    first point; the final original point is always kept, so the result has
    ``(len(path) - 1) * points_per_segment + 1`` points.
    """
    if points_per_segment < 1:
        raise ValueError("points_per_segment must be >= 1")
    if len(path) < 2:
        return list(path)

    dense: list[LatLng] = []
    for (lat1, lon1), (lat2, lon2) in zip(path, path[1:]):
        for k in range(points_per_segment):
            t = k / points_per_segment
            dense.append((lat1 + (lat2 - lat1) * t, lon1 + (lon2 - lon1) * t))
    dense.append(path[-1])
    return dense


def project_onto_segment(location: LatLng, start: LatLng, end: LatLng) -> LatLng:
    """Closest point to ``location`` on the segment start-end, clamped to its endpoints."""
    if start == end:
        return start
    # Shapely uses (x, y) = (lon, lat)
    segment = LineString([(start[1], start[0]), (end[1], end[0])])
    # project() clamps to [0, length]
    along = segment.project(Point(location[1], location[0]))
    pt = segment.interpolate(along)
    return (pt.y, pt.x)


@dataclass
class TrackResult:
    segment_index: int
    snapped: LatLng  # projected point on the path
    distance_m: float  # rider -> path
    progress: float  # 0.0-1.0 along the path, by distance


def _nearest(location: LatLng, path: list[LatLng]) -> tuple[int, LatLng, float] | None:
    best: tuple[int, LatLng, float] | None = None
    for i in range(len(path) - 1):
        snapped = project_onto_segment(location, path[i], path[i + 1])
        dist = haversine_m(location, snapped)
        # Ties keep the lowest index
        if best is None or dist < best[2] - TIE_TOLERANCE_M:
            best = (i, snapped, dist)
    return best


def closest_segment(location: LatLng, path: list[LatLng]) -> int | None:
    """Index of the path segment nearest to location, or None for paths with < 2 points."""
    best = _nearest(location, path)
    if best is None:
        return None
    return best[0]


def path_length_m(path: list[LatLng]) -> float:
    return sum(haversine_m(a, b) for a, b in zip(path, path[1:]))


def track_position(location: LatLng, path: list[LatLng]) -> TrackResult | None:
    """Locate a rider on the path: nearest segment, snapped point and progress."""
    best = _nearest(location, path)
    if best is None:
        return None
    index, snapped, dist = best

    total = path_length_m(path)
    travelled = path_length_m(path[: index + 1]) + haversine_m(path[index], snapped)
    progress = travelled / total if total > 0 else 0.0

    return TrackResult(
        segment_index=index,
        snapped=snapped,
        distance_m=dist,
        progress=max(0.0, min(1.0, progress)),
    )
