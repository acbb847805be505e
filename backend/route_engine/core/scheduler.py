"""APScheduler setup for periodic tasks."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = logging.getLogger(__name__)


def create_scheduler(catalog) -> AsyncIOScheduler:
    """Create and configure the scheduler with all jobs."""
    from route_engine.config import settings

    scheduler = AsyncIOScheduler()

    # Refresh the stops/routes snapshot every N hours
    scheduler.add_job(
        catalog.load,
        "interval",
        hours=settings.catalog_refresh_hours,
        id="refresh_catalog",
        name="Refresh routes and stops from the backend store",
        max_instances=1,
    )

    return scheduler
