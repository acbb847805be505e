"""In-memory snapshot of the route network read from the backend store."""

import logging

from sqlalchemy import select

from route_engine.core.network import EntityKind, NetworkEntity, RouteRecord
from route_engine.core.waypoint_assembler import build_entities
from route_engine.models.tables import Route, Stop

logger = logging.getLogger(__name__)


class NetworkCatalog:
    """Read-only stops/routes snapshot used to resolve search names."""

    def __init__(self, session_factory=None) -> None:
        self.session_factory = session_factory
        self.routes: list[RouteRecord] = []
        self.stops: list[NetworkEntity] = []
        self.entities: list[NetworkEntity] = []

    def load_snapshot(self, stops: list[NetworkEntity], routes: list[RouteRecord]) -> None:
        """Replace the snapshot with already-fetched records."""
        self.stops = list(stops)
        self.routes = list(routes)
        self.entities = build_entities(self.stops, self.routes)

    async def load(self) -> None:
        """Fetch all routes and stops; keeps the previous snapshot on failure."""
        if self.session_factory is None:
            logger.warning("No session factory configured, catalog stays empty")
            return
        try:
            async with self.session_factory() as session:
                route_rows = (await session.execute(select(Route).order_by(Route.id))).scalars().all()
                stop_rows = (await session.execute(
                    select(Stop).order_by(Stop.route_id, Stop.stop_order)
                )).scalars().all()
        except Exception:
            logger.exception("Failed to load routes/stops from database")
            return

        routes = [
            RouteRecord(
                id=r.id,
                origin_name=r.origin_name,
                destination_name=r.destination_name,
                origin_lat=r.origin_lat,
                origin_lon=r.origin_lon,
                destination_lat=r.destination_lat,
                destination_lon=r.destination_lon,
            )
            for r in route_rows
        ]
        stops = [
            NetworkEntity(
                id=s.id, name=s.name, lat=s.lat, lon=s.lon,
                route_id=s.route_id, kind=EntityKind.STOP, stop_order=s.stop_order,
            )
            for s in stop_rows
        ]
        self.load_snapshot(stops, routes)
        logger.info("Loaded %d routes, %d stops", len(routes), len(stops))

    def route_stops(self, route_id: int) -> list[NetworkEntity]:
        return [s for s in self.stops if s.route_id == route_id]
