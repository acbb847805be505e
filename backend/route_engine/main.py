"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from route_engine.api import routes, search, stops, ws
from route_engine.config import settings
from route_engine.core.catalog import NetworkCatalog
from route_engine.core.directions_client import DirectionsClient
from route_engine.core.scheduler import create_scheduler
from route_engine.core.search import RouteSearch
from route_engine.db.session import async_session, engine
from route_engine.models.base import Base
from route_engine.models import tables  # noqa: F401

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    # Create tables if they don't exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Initialize services
    catalog = NetworkCatalog(async_session)
    directions = DirectionsClient()
    route_search = RouteSearch(catalog, directions)

    # Wire up API modules
    routes.catalog = catalog
    stops.catalog = catalog
    search.route_search = route_search
    ws.route_search = route_search

    await catalog.load()

    scheduler = create_scheduler(catalog)
    scheduler.start()
    if not settings.directions_api_key:
        logger.warning("DIRECTIONS_API_KEY is not set - route searches will fail")
    logger.info("Route engine started with %d routes", len(catalog.routes))

    yield

    # Shutdown
    scheduler.shutdown(wait=False)
    await directions.close()
    await engine.dispose()
    logger.info("Route engine shut down")


app = FastAPI(
    title="Combi Route Engine",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes.router)
app.include_router(stops.router)
app.include_router(search.router)
app.include_router(ws.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
