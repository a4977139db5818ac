"""Flight search and booking API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser
from planera.domains.booking.schemas import (
    FlightBookingDraftCreate,
    FlightBookingDraftResponse,
    FlightBookingDraftUpdate,
    FlightBookingResponse,
    FlightOfferCheck,
    FlightSearchResponse,
)
from planera.domains.booking.service import BookingService
from planera.infra.database import get_db

router = APIRouter(tags=["Flight Booking"])


def get_booking_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> BookingService:
    """Dependency for getting BookingService."""
    return BookingService(session)


BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]


# ==================== Search ====================


@router.get(
    "/trips/{trip_id}/flights",
    response_model=FlightSearchResponse,
    summary="Search live flights for a trip",
)
async def search_flights(
    trip_id: UUID,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightSearchResponse:
    """Duffel offers for the trip, cheapest first.

    Raises:
        502 Bad Gateway: If Duffel is unavailable
    """
    return await service.search_flights(trip_id, user.id)


@router.get(
    "/flights/offers/{offer_id}",
    response_model=FlightOfferCheck,
    response_model_by_alias=True,
    summary="Revalidate an offer",
)
async def get_flight_offer(
    offer_id: str,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightOfferCheck:
    return await service.get_flight_offer(offer_id)


# ==================== Drafts ====================


@router.post(
    "/trips/{trip_id}/booking-drafts",
    response_model=FlightBookingDraftResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start booking an offer",
)
async def create_draft(
    trip_id: UUID,
    data: FlightBookingDraftCreate,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightBookingDraftResponse:
    """Raises 400 Bad Request when the offer has expired."""
    draft = await service.create_draft(trip_id, user.id, data.offer_id)
    return FlightBookingDraftResponse.model_validate(draft)


@router.get(
    "/booking-drafts/{draft_id}",
    response_model=FlightBookingDraftResponse,
    summary="Get a booking draft",
)
async def get_draft(
    draft_id: UUID,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightBookingDraftResponse:
    return FlightBookingDraftResponse.model_validate(await service.get_draft(draft_id, user.id))


@router.patch(
    "/booking-drafts/{draft_id}",
    response_model=FlightBookingDraftResponse,
    summary="Save booking tabs",
)
async def update_draft(
    draft_id: UUID,
    data: FlightBookingDraftUpdate,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightBookingDraftResponse:
    draft = await service.update_draft(draft_id, user.id, data)
    return FlightBookingDraftResponse.model_validate(draft)


@router.post(
    "/booking-drafts/{draft_id}/submit",
    response_model=FlightBookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book the flight",
)
async def submit_draft(
    draft_id: UUID,
    user: ActiveUser,
    service: BookingServiceDep,
) -> FlightBookingResponse:
    """Place the order and email a confirmation.

    Raises:
        400 Bad Request: Expired offer, unacknowledged policy or no passengers
        502 Bad Gateway: If Duffel rejects the order
    """
    booking = await service.submit_draft(draft_id, user.id)
    return FlightBookingResponse.model_validate(booking)


# ==================== Bookings ====================


@router.get(
    "/trips/{trip_id}/bookings",
    response_model=list[FlightBookingResponse],
    summary="List a trip's flight bookings",
)
async def list_bookings(
    trip_id: UUID,
    user: ActiveUser,
    service: BookingServiceDep,
) -> list[FlightBookingResponse]:
    bookings = await service.list_bookings(trip_id, user.id)
    return [FlightBookingResponse.model_validate(b) for b in bookings]
