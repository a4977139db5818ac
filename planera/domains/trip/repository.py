"""Repository for the Trip domain."""

import logging
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.shared.repository import GenericRepository
from planera.domains.trip.models import Trip, TripStatus
from planera.domains.trip.schemas import TripCreate, TripUpdate

logger = logging.getLogger(__name__)


class TripRepository(GenericRepository[Trip, TripCreate, TripUpdate]):
    """Repository for Trip persistence.

    Generation results are written with a compare on ``generation_version``
    so that a slow, superseded run cannot overwrite a newer one.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Trip, session)

    async def list_for_user(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> Sequence[Trip]:
        """The user's trips, newest first."""
        return await self.find_many(
            Trip.user_id == user_id,
            skip=skip,
            limit=limit,
            order_by=[Trip.created_at.desc(), Trip.id.desc()],
        )

    async def list_completed(self, user_id: UUID, now_ms: int) -> Sequence[Trip]:
        """The user's generated trips whose end date has passed."""
        return await self.find_many(
            Trip.user_id == user_id,
            Trip.status == TripStatus.COMPLETED,
            Trip.end_date < now_ms,
            order_by=Trip.end_date.desc(),
        )

    async def has_completed_trip_to(self, user_id: UUID, destination: str, now_ms: int) -> bool:
        """Whether a completed, past trip's destination contains ``destination``."""
        count = await self.count(
            Trip.user_id == user_id,
            Trip.status == TripStatus.COMPLETED,
            Trip.end_date < now_ms,
            func.lower(Trip.destination).contains(destination.lower(), autoescape=True),
        )
        return count > 0

    async def bump_generation(self, trip_id: UUID) -> int:
        """Start a new generation run for a trip.

        The increment happens in the database, so overlapping calls each get
        their own version.

        Returns:
            The new ``generation_version``
        """
        result = await self.session.execute(
            update(Trip)
            .where(Trip.id == trip_id)
            .values(
                generation_version=Trip.generation_version + 1,
                status=TripStatus.GENERATING,
                error_message=None,
            )
            .returning(Trip.generation_version)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()

    # ==================== Generation results ====================

    async def _write_if_current(
        self,
        trip_id: UUID,
        generation_version: int,
        values: dict[str, Any],
    ) -> bool:
        updated = await self.update_many(
            Trip.id == trip_id,
            Trip.generation_version == generation_version,
            data=values,
        )
        if not updated:
            logger.info(
                f"Discarding stale generation v{generation_version} for trip {trip_id}"
            )
        return bool(updated)

    async def save_generation_result(
        self,
        trip_id: UUID,
        generation_version: int,
        itinerary: dict[str, Any],
    ) -> bool:
        """Store a completed itinerary if the run is still current.

        Returns:
            False when a newer generation has started since this run began
        """
        return await self._write_if_current(
            trip_id,
            generation_version,
            {
                "itinerary": itinerary,
                "status": TripStatus.COMPLETED,
                "error_message": None,
                "completed_at": datetime.now(timezone.utc),
            },
        )

    async def mark_failed(
        self,
        trip_id: UUID,
        generation_version: int,
        error_message: str,
    ) -> bool:
        """Record a failed run if it is still current. Clears the itinerary."""
        return await self._write_if_current(
            trip_id,
            generation_version,
            {
                "itinerary": None,
                "status": TripStatus.FAILED,
                "error_message": error_message[:2000],
            },
        )
