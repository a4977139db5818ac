"""Services for the Trip domain."""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.config import settings
from planera.core.exceptions import PlanLimitError
from planera.domains.booking.repository import FlightBookingDraftRepository
from planera.domains.cart.repository import CartRepository
from planera.domains.trip.models import Trip, TripStatus
from planera.domains.trip.repository import TripRepository
from planera.domains.trip.schemas import TripCreate, TripResponse, TripUpdate
from planera.domains.user.models import User
from planera.domains.user.repository import UserRepository

logger = logging.getLogger(__name__)


class TripService:
    """Trip creation, ownership-checked CRUD and regeneration.

    Every read and write is scoped to the calling user; trips owned by
    someone else are reported as not found.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = TripRepository(session)
        self.user_repository = UserRepository(session)
        self.cart_repository = CartRepository(session)
        self.draft_repository = FlightBookingDraftRepository(session)

    def _enqueue_generation(self, trip_id: UUID, generation_version: int) -> None:
        from planera.domains.trip.tasks import generate_trip_task

        result = generate_trip_task.delay(str(trip_id), generation_version)
        logger.info(
            f"Queued generation v{generation_version} for trip {trip_id} (task {result.id})"
        )

    def check_plan_limit(self, user: User) -> None:
        """Raise if a free-plan user has used up their trip generations.

        Raises:
            PlanLimitError: If the free plan limit is reached
        """
        if not user.is_premium and user.trips_generated >= settings.FREE_PLAN_TRIP_LIMIT:
            raise PlanLimitError()

    # ==================== Trip Operations ====================

    async def create_trip(self, user: User, data: TripCreate) -> Trip:
        """Create a trip and queue its generation.

        Args:
            user: Owner; free-plan users are limited to FREE_PLAN_TRIP_LIMIT trips
            data: Trip inputs

        Returns:
            The new trip with status ``generating``

        Raises:
            PlanLimitError: If the free plan limit is reached
        """
        self.check_plan_limit(user)

        trip = await self.repository.create(
            {
                **data.model_dump(),
                "user_id": user.id,
                "status": TripStatus.GENERATING,
                "generation_version": 1,
            }
        )
        await self.user_repository.increment_trips_generated(user)
        await self.session.commit()

        logger.info(f"Created trip {trip.id} to {trip.destination} for user {user.id}")
        self._enqueue_generation(trip.id, trip.generation_version)
        return trip

    async def list_trips(self, user_id: UUID, skip: int = 0, limit: int = 100) -> Sequence[Trip]:
        """The user's trips, newest first."""
        return await self.repository.list_for_user(user_id, skip=skip, limit=limit)

    async def get_trip(self, trip_id: UUID, user_id: UUID) -> Trip:
        """Get an owned trip.

        Raises:
            NotFoundError: If the trip is missing or not owned by the user
        """
        return await self.repository.get_owned(trip_id, user_id)

    async def get_trip_details(self, trip_id: UUID, user: User) -> TripResponse:
        """An owned trip with the owner's plan attached."""
        trip = await self.get_trip(trip_id, user.id)
        response = TripResponse.model_validate(trip)
        response.user_plan = user.plan
        return response

    async def update_trip(self, trip_id: UUID, user_id: UUID, data: TripUpdate) -> Trip:
        """Partially update an owned trip. The itinerary is left as is."""
        trip = await self.get_trip(trip_id, user_id)
        trip = await self.repository.apply(trip, data)
        await self.session.commit()
        return trip

    async def regenerate_trip(self, trip_id: UUID, user_id: UUID) -> Trip:
        """Start a new generation run for an owned trip.

        The previous itinerary stays visible until the new run stores its
        result; a still-running older run can no longer write.
        """
        trip = await self.get_trip(trip_id, user_id)
        version = await self.repository.bump_generation(trip.id)
        await self.session.commit()
        await self.session.refresh(trip)

        logger.info(f"Regenerating trip {trip.id} as v{version}")
        self._enqueue_generation(trip.id, version)
        return trip

    async def delete_trip(self, trip_id: UUID, user_id: UUID) -> None:
        """Delete an owned trip together with its cart and booking drafts."""
        trip = await self.get_trip(trip_id, user_id)
        await self.cart_repository.delete_for_trip(trip.id)
        await self.draft_repository.delete_for_trip(trip.id)
        await self.repository.remove(trip)
        await self.session.commit()
        logger.info(f"Deleted trip {trip_id}")
