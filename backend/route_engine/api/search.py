"""Route search, position tracking and ETA endpoints."""

import datetime
import logging

from fastapi import APIRouter, HTTPException

from route_engine.config import settings
from route_engine.core.errors import (
    AmbiguousRouteError,
    InputMismatchError,
    InsufficientWaypointsError,
    InvalidWaypointError,
    NotFoundError,
    RouteDataError,
    RouteEngineError,
    RouteUnavailable,
)
from route_engine.core.eta import build_etas, estimate_etas
from route_engine.core.geometry import track_position
from route_engine.core.network import Leg, Waypoint
from route_engine.core.search import SearchResult
from route_engine.schemas.search import (
    EtaItem,
    EtaRequest,
    EtaResponse,
    SearchRequest,
    SearchResponse,
    TimedStop,
    TrackRequest,
    TrackResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])

# Will be set by main.py
route_search = None

SEARCH_FAILED = "Search failed, try different stops"

_ERROR_STATUS = [
    (NotFoundError, 404),
    (AmbiguousRouteError, 409),
    (InsufficientWaypointsError, 422),
    (InvalidWaypointError, 422),
    (InputMismatchError, 422),
    (RouteUnavailable, 503),
    (RouteDataError, 500),
]


def error_payload(exc: RouteEngineError) -> dict:
    return {"error": type(exc).__name__, "message": SEARCH_FAILED, "reason": str(exc)}


def to_http_error(exc: RouteEngineError) -> HTTPException:
    status = 500
    for cls, code in _ERROR_STATUS:
        if isinstance(exc, cls):
            status = code
            break
    return HTTPException(status_code=status, detail=error_payload(exc))


def search_response(result: SearchResult) -> SearchResponse:
    return SearchResponse(
        route_id=result.route_id,
        direction=result.direction.value,
        distance_m=result.distance_m,
        stops=[
            TimedStop(
                name=t.waypoint.name,
                lat=t.waypoint.latitude,
                lon=t.waypoint.longitude,
                kind=t.waypoint.kind.value,
                stop_order=t.waypoint.stop_order,
                eta=t.eta,
            )
            for t in result.stops
        ],
        path=[[lat, lon] for lat, lon in result.path],
    )


@router.post("/search", response_model=SearchResponse)
async def search(req: SearchRequest):
    """Assemble stops between two names and fetch the shortest drivable path."""
    if route_search is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    try:
        result = await route_search.run(
            req.from_name, req.to_name, points_per_segment=req.points_per_segment,
        )
    except RouteEngineError as e:
        logger.info("Search %r -> %r failed: %s", req.from_name, req.to_name, e)
        raise to_http_error(e) from e
    return search_response(result)


@router.post("/track", response_model=TrackResponse)
async def track(req: TrackRequest):
    """Locate a rider on a previously returned path."""
    path = [(p[0], p[1]) for p in req.path]
    result = track_position((req.location.lat, req.location.lon), path)
    if result is None:
        return TrackResponse()
    return TrackResponse(
        segment_index=result.segment_index,
        snapped=list(result.snapped),
        distance_m=result.distance_m,
        progress=result.progress,
    )


@router.post("/etas", response_model=EtaResponse)
async def etas(req: EtaRequest):
    """Per-stop ETAs from provider legs, or an average-speed estimate without them."""
    now = datetime.datetime.now(datetime.timezone.utc)
    waypoints = [
        Waypoint(latitude=w.lat, longitude=w.lon, name=w.name, stop_order=i)
        for i, w in enumerate(req.waypoints)
    ]
    try:
        if req.legs is None:
            timed = estimate_etas(waypoints, now, settings.average_speed_kmh)
        else:
            legs = [
                Leg(
                    distance_m=leg.distance_m,
                    duration_s=leg.duration_s,
                    duration_in_traffic_s=leg.duration_in_traffic_s,
                )
                for leg in req.legs
            ]
            timed = build_etas(waypoints, legs, now)
    except RouteEngineError as e:
        raise to_http_error(e) from e
    return EtaResponse(etas=[EtaItem(name=t.waypoint.name, eta=t.eta) for t in timed])
