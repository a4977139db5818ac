"""Repositories for the flight booking flow."""

from typing import Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.booking.models import FlightBooking, FlightBookingDraft
from planera.domains.booking.schemas import FlightBookingDraftUpdate
from planera.domains.shared.repository import GenericRepository


class FlightBookingDraftRepository(
    GenericRepository[FlightBookingDraft, BaseModel, FlightBookingDraftUpdate]
):
    """Repository for booking drafts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(FlightBookingDraft, session)

    async def delete_for_trip(self, trip_id: UUID) -> int:
        """Delete every draft of a trip."""
        return await self.delete_many(FlightBookingDraft.trip_id == trip_id)


class FlightBookingRepository(GenericRepository[FlightBooking, BaseModel, BaseModel]):
    """Repository for placed flight bookings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(FlightBooking, session)

    async def list_for_trip(self, trip_id: UUID, user_id: UUID) -> Sequence[FlightBooking]:
        """The user's bookings for a trip, newest first."""
        return await self.find_many(
            FlightBooking.trip_id == trip_id,
            FlightBooking.user_id == user_id,
        )
