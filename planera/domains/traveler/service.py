"""Services for the Traveler domain."""

import logging
from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.exceptions import AuthNotReadyError
from planera.domains.traveler.models import Traveler
from planera.domains.traveler.repository import TravelerRepository
from planera.domains.traveler.schemas import (
    BookingReadiness,
    PassengerType,
    TravelerCreate,
    TravelerResponse,
    TravelerUpdate,
    TravelerWithAge,
)
from planera.domains.user.models import User

logger = logging.getLogger(__name__)

INFANT_MAX_AGE = 2
CHILD_MAX_AGE = 12

# Label reported for each field a booking needs
REQUIRED_FIELDS = (
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
    ("date_of_birth", "Date of Birth"),
    ("gender", "Gender"),
    ("passport_number", "Passport Number"),
    ("passport_issuing_country", "Passport Country"),
    ("passport_expiry_date", "Passport Expiry"),
)
PASSPORT_EXPIRED = "Passport has expired"
TRAVELER_NOT_FOUND = "Traveler not found"


def age_on(date_of_birth: date, on: date) -> int:
    """Completed years between ``date_of_birth`` and ``on``."""
    before_birthday = (on.month, on.day) < (date_of_birth.month, date_of_birth.day)
    return on.year - date_of_birth.year - before_birthday


def passenger_type_for_age(age: int) -> PassengerType:
    if age < INFANT_MAX_AGE:
        return "infant"
    if age < CHILD_MAX_AGE:
        return "child"
    return "adult"


def booking_readiness(traveler: Traveler, today: date | None = None) -> BookingReadiness:
    """Check a traveler profile has everything a flight booking needs."""
    today = today or date.today()
    missing = [label for field, label in REQUIRED_FIELDS if not getattr(traveler, field)]
    if traveler.passport_expiry_date and traveler.passport_expiry_date < today:
        missing.append(PASSPORT_EXPIRED)
    return BookingReadiness(ready=not missing, missing_fields=missing)


class TravelerService:
    """Saved passenger profiles.

    A user has at most one default traveler; marking one as default
    unmarks the others, and the first profile a user saves becomes the
    default.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = TravelerRepository(session)

    async def list_travelers(self, user: User | None) -> Sequence[Traveler]:
        """The caller's travelers; empty while the caller is not signed in."""
        if user is None:
            return []
        return await self.repository.list_for_user(user.id)

    async def get_traveler(self, traveler_id: UUID, user_id: UUID) -> Traveler:
        """Get an owned traveler.

        Raises:
            NotFoundError: If the traveler is missing or owned by someone else
        """
        return await self.repository.get_owned(traveler_id, user_id)

    async def create_traveler(self, user: User | None, data: TravelerCreate) -> Traveler:
        """Save a traveler profile.

        Raises:
            AuthNotReadyError: If the caller's session is not established yet
        """
        if user is None:
            raise AuthNotReadyError()

        is_first = await self.repository.count_for_user(user.id) == 0
        if data.is_default:
            await self.repository.clear_default(user.id)

        traveler = await self.repository.create(
            {
                **data.model_dump(),
                "user_id": user.id,
                "is_default": data.is_default or is_first,
            }
        )
        await self.session.commit()
        logger.info(f"Created traveler {traveler.id} for user {user.id}")
        return traveler

    async def update_traveler(
        self,
        traveler_id: UUID,
        user_id: UUID,
        data: TravelerUpdate,
    ) -> Traveler:
        """Update an owned traveler."""
        traveler = await self.get_traveler(traveler_id, user_id)
        if data.is_default:
            await self.repository.clear_default(user_id, keep_id=traveler.id)
        traveler = await self.repository.apply(traveler, data)
        await self.session.commit()
        return traveler

    async def delete_traveler(self, traveler_id: UUID, user_id: UUID) -> None:
        """Delete an owned traveler."""
        traveler = await self.get_traveler(traveler_id, user_id)
        await self.repository.remove(traveler)
        await self.session.commit()

    async def is_booking_ready(
        self,
        traveler_id: UUID,
        user_id: UUID,
        today: date | None = None,
    ) -> BookingReadiness:
        """Booking readiness of a traveler; an unknown traveler is never ready."""
        traveler = await self.repository.find_one(
            Traveler.id == traveler_id,
            Traveler.user_id == user_id,
        )
        if traveler is None:
            return BookingReadiness(ready=False, missing_fields=[TRAVELER_NOT_FOUND])
        return booking_readiness(traveler, today)

    async def get_with_ages(
        self,
        user_id: UUID,
        traveler_ids: list[UUID],
        departure_date: date,
    ) -> list[TravelerWithAge]:
        """Travelers with their age and passenger type at departure.

        Ids that are unknown or owned by someone else are skipped; the
        order of ``traveler_ids`` is kept.
        """
        owned = await self.repository.find_owned(traveler_ids, user_id)
        result = []
        for traveler_id in traveler_ids:
            traveler = owned.get(traveler_id)
            if traveler is None:
                continue
            age = age_on(traveler.date_of_birth, departure_date)
            result.append(
                TravelerWithAge(
                    **TravelerResponse.model_validate(traveler).model_dump(),
                    age=age,
                    passenger_type=passenger_type_for_age(age),
                )
            )
        return result
