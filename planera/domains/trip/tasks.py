"""
Planera Backend - Trip Generation Tasks
Celery entry point for the async generation pipeline
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from planera.infra.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _run_generation(trip_id: UUID, generation_version: int) -> bool:
    from planera.domains.trip.generator import generate_trip
    from planera.infra.database import async_session_factory, db_manager

    try:
        async with async_session_factory() as session:
            return await generate_trip(session, trip_id, generation_version)
    finally:
        # Pooled connections are bound to this event loop
        await db_manager.close()


@celery_app.task(
    bind=True,
    name="planera.domains.trip.tasks.generate_trip_task",
    max_retries=0,
    soft_time_limit=540,
    time_limit=600,
)
def generate_trip_task(self, trip_id: str, generation_version: int) -> dict[str, Any]:
    """
    Generate the itinerary for one trip generation run.

    The pipeline records a failed run on the trip itself before the
    exception propagates here, so the task is not retried.

    Args:
        trip_id: Trip to generate
        generation_version: Version the run was started for

    Returns:
        Dictionary with the trip id and whether the result was stored
    """
    logger.info(f"Task {self.request.id}: generating trip {trip_id} v{generation_version}")
    stored = asyncio.run(_run_generation(UUID(trip_id), generation_version))
    if not stored:
        logger.info(f"Task {self.request.id}: trip {trip_id} v{generation_version} was superseded")
    return {
        "trip_id": trip_id,
        "generation_version": generation_version,
        "stored": stored,
    }
