"""Saved traveler API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser, OptionalUser
from planera.domains.traveler.schemas import (
    BookingReadiness,
    TravelerCreate,
    TravelerResponse,
    TravelersWithAgesRequest,
    TravelerUpdate,
    TravelerWithAge,
)
from planera.domains.traveler.service import TravelerService
from planera.infra.database import get_db

router = APIRouter(prefix="/travelers", tags=["Travelers"])


def get_traveler_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> TravelerService:
    """Dependency for getting TravelerService."""
    return TravelerService(session)


TravelerServiceDep = Annotated[TravelerService, Depends(get_traveler_service)]


@router.get("", response_model=list[TravelerResponse], summary="List saved travelers")
async def list_travelers(user: OptionalUser, service: TravelerServiceDep) -> list[TravelerResponse]:
    """Default traveler first. Empty while sign-in has not settled."""
    travelers = await service.list_travelers(user)
    return [TravelerResponse.model_validate(t) for t in travelers]


@router.post(
    "",
    response_model=TravelerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a traveler",
)
async def create_traveler(
    data: TravelerCreate,
    user: OptionalUser,
    service: TravelerServiceDep,
) -> TravelerResponse:
    """Save a traveler; the first one becomes the default.

    Raises:
        401 Unauthorized: ``AUTH_NOT_READY`` while sign-in has not settled
    """
    return TravelerResponse.model_validate(await service.create_traveler(user, data))


@router.post("/with-ages", response_model=list[TravelerWithAge], summary="Ages at departure")
async def travelers_with_ages(
    data: TravelersWithAgesRequest,
    user: ActiveUser,
    service: TravelerServiceDep,
) -> list[TravelerWithAge]:
    return await service.get_with_ages(user.id, data.traveler_ids, data.departure_date)


@router.get("/{traveler_id}", response_model=TravelerResponse, summary="Get a traveler")
async def get_traveler(
    traveler_id: UUID,
    user: ActiveUser,
    service: TravelerServiceDep,
) -> TravelerResponse:
    return TravelerResponse.model_validate(await service.get_traveler(traveler_id, user.id))


@router.patch("/{traveler_id}", response_model=TravelerResponse, summary="Update a traveler")
async def update_traveler(
    traveler_id: UUID,
    data: TravelerUpdate,
    user: ActiveUser,
    service: TravelerServiceDep,
) -> TravelerResponse:
    traveler = await service.update_traveler(traveler_id, user.id, data)
    return TravelerResponse.model_validate(traveler)


@router.delete("/{traveler_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a traveler")
async def delete_traveler(traveler_id: UUID, user: ActiveUser, service: TravelerServiceDep) -> None:
    await service.delete_traveler(traveler_id, user.id)


@router.get(
    "/{traveler_id}/booking-ready",
    response_model=BookingReadiness,
    summary="Check booking readiness",
)
async def booking_ready(
    traveler_id: UUID,
    user: ActiveUser,
    service: TravelerServiceDep,
) -> BookingReadiness:
    """Missing required fields, or an expired passport."""
    return await service.is_booking_ready(traveler_id, user.id)
