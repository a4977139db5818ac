"""
Tests for TravelerService and the age/readiness helpers.
"""

from datetime import date
from uuid import uuid4

import pytest
import pytest_asyncio

from planera.core.exceptions import AuthNotReadyError, NotFoundError
from planera.domains.traveler.models import Gender, Traveler
from planera.domains.traveler.schemas import TravelerCreate, TravelerUpdate
from planera.domains.traveler.service import (
    TravelerService,
    age_on,
    booking_readiness,
    passenger_type_for_age,
)

DEPARTURE = date(2024, 6, 1)


def _create(**overrides) -> TravelerCreate:
    data = {
        "first_name": "Maria",
        "last_name": "Papadopoulou",
        "date_of_birth": date(1990, 3, 14),
        "gender": Gender.FEMALE,
        "passport_number": "AE1234567",
        "passport_issuing_country": "gr",
        "passport_expiry_date": date(2030, 1, 1),
        "email": "maria@example.com",
    }
    data.update(overrides)
    return TravelerCreate(**data)


@pytest_asyncio.fixture
async def service(session) -> TravelerService:
    return TravelerService(session)


class TestAges:
    """Tests for age_on and passenger_type_for_age."""

    def test_age_counts_completed_years(self):
        assert age_on(date(2000, 6, 2), DEPARTURE) == 23
        assert age_on(date(2000, 6, 1), DEPARTURE) == 24

    @pytest.mark.parametrize(
        "age,expected",
        [(0, "infant"), (1, "infant"), (2, "child"), (11, "child"), (12, "adult"), (40, "adult")],
    )
    def test_passenger_type_boundaries(self, age, expected):
        assert passenger_type_for_age(age) == expected


class TestBookingReadiness:
    """Tests for booking_readiness."""

    def test_complete_profile_is_ready(self):
        traveler = Traveler(**_create().model_dump(exclude={"is_default"}))

        result = booking_readiness(traveler, today=DEPARTURE)
        assert result.ready is True
        assert result.missing_fields == []

    def test_missing_passport_fields(self):
        traveler = Traveler(
            **_create(passport_number=None, passport_expiry_date=None).model_dump(exclude={"is_default"})
        )

        result = booking_readiness(traveler, today=DEPARTURE)
        assert result.ready is False
        assert result.missing_fields == ["Passport Number", "Passport Expiry"]

    def test_expired_passport(self):
        traveler = Traveler(
            **_create(passport_expiry_date=date(2024, 5, 31)).model_dump(exclude={"is_default"})
        )

        result = booking_readiness(traveler, today=DEPARTURE)
        assert result.missing_fields == ["Passport has expired"]


class TestTravelerService:
    """Tests for TravelerService."""

    @pytest.mark.asyncio
    async def test_first_traveler_becomes_default(self, service, user):
        first = await service.create_traveler(user, _create())
        second = await service.create_traveler(user, _create(first_name="Nikos"))

        assert first.is_default is True
        assert second.is_default is False
        assert first.passport_issuing_country == "GR"

    @pytest.mark.asyncio
    async def test_new_default_unmarks_previous(self, session, service, user):
        first = await service.create_traveler(user, _create())
        second = await service.create_traveler(user, _create(first_name="Nikos", is_default=True))

        await session.refresh(first)
        assert first.is_default is False
        assert second.is_default is True

    @pytest.mark.asyncio
    async def test_update_to_default(self, session, service, user):
        first = await service.create_traveler(user, _create())
        second = await service.create_traveler(user, _create(first_name="Nikos"))

        await service.update_traveler(second.id, user.id, TravelerUpdate(is_default=True))

        await session.refresh(first)
        await session.refresh(second)
        assert first.is_default is False
        assert second.is_default is True

    @pytest.mark.asyncio
    async def test_signed_out_caller(self, service):
        assert await service.list_travelers(None) == []
        with pytest.raises(AuthNotReadyError):
            await service.create_traveler(None, _create())

    @pytest.mark.asyncio
    async def test_ownership(self, service, user, make_user):
        stranger = await make_user()
        traveler = await service.create_traveler(user, _create())

        with pytest.raises(NotFoundError):
            await service.get_traveler(traveler.id, stranger.id)
        with pytest.raises(NotFoundError):
            await service.delete_traveler(traveler.id, stranger.id)

        readiness = await service.is_booking_ready(traveler.id, stranger.id)
        assert readiness.ready is False
        assert readiness.missing_fields == ["Traveler not found"]

    @pytest.mark.asyncio
    async def test_delete(self, service, user):
        traveler = await service.create_traveler(user, _create())
        await service.delete_traveler(traveler.id, user.id)

        assert await service.list_travelers(user) == []

    @pytest.mark.asyncio
    async def test_with_ages_keeps_requested_order(self, service, user, make_user):
        adult = await service.create_traveler(user, _create())
        child = await service.create_traveler(user, _create(first_name="Eleni", date_of_birth=date(2016, 9, 1)))
        infant = await service.create_traveler(user, _create(first_name="Alex", date_of_birth=date(2023, 8, 1)))
        stranger = await make_user()
        foreign = await service.create_traveler(stranger, _create(first_name="Someone"))

        result = await service.get_with_ages(
            user.id, [infant.id, foreign.id, uuid4(), adult.id, child.id], DEPARTURE
        )

        assert [t.first_name for t in result] == ["Alex", "Maria", "Eleni"]
        assert [t.passenger_type for t in result] == ["infant", "adult", "child"]
        assert [t.age for t in result] == [0, 34, 7]
