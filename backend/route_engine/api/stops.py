"""Stop REST API endpoints."""

from fastapi import APIRouter

from route_engine.schemas.route import StopInfo

router = APIRouter(prefix="/api/stops", tags=["stops"])

# Will be set by main.py
catalog = None


@router.get("", response_model=list[StopInfo])
async def list_stops(route: int | None = None):
    """Get all stops, optionally for one route."""
    if catalog is None:
        return []
    stops = catalog.stops
    if route is not None:
        stops = [s for s in stops if s.route_id == route]
    return [
        StopInfo(id=s.id, name=s.name, lat=s.lat, lon=s.lon, route_id=s.route_id, stop_order=s.stop_order)
        for s in sorted(stops, key=lambda s: s.name)
    ]
