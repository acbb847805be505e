"""Route REST API endpoints."""

from fastapi import APIRouter, HTTPException

from route_engine.schemas.route import RouteInfo, StopInfo

router = APIRouter(prefix="/api/routes", tags=["routes"])

# Will be set by main.py
catalog = None


def _route_info(r) -> RouteInfo:
    return RouteInfo(
        id=r.id,
        origin_name=r.origin_name,
        destination_name=r.destination_name,
        origin=[r.origin_lat, r.origin_lon],
        destination=[r.destination_lat, r.destination_lon],
    )


@router.get("", response_model=list[RouteInfo])
async def list_routes():
    """Get all routes with their terminals."""
    if catalog is None:
        return []
    return [_route_info(r) for r in catalog.routes]


@router.get("/{route_id}/stops", response_model=list[StopInfo])
async def get_route_stops(route_id: int):
    """Get a route's intermediate stops in canonical order."""
    if catalog is None or not any(r.id == route_id for r in catalog.routes):
        raise HTTPException(status_code=404, detail="Route not found")
    stops = sorted(catalog.route_stops(route_id), key=lambda s: s.stop_order)
    return [
        StopInfo(id=s.id, name=s.name, lat=s.lat, lon=s.lon, route_id=s.route_id, stop_order=s.stop_order)
        for s in stops
    ]
