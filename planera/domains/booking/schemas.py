"""Pydantic schemas for the flight booking flow."""

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from planera.domains.booking.models import FlightBookingStatus
from planera.domains.traveler.models import Gender

Title = Literal["mr", "ms", "mrs", "miss", "dr"]


# ============ Search and revalidation ============


class FlightSearchResponse(BaseModel):
    """Live flight options for a trip, cheapest first."""

    offer_request_id: str
    flights: list[dict[str, Any]]


class FlightOfferCheck(BaseModel):
    """Result of revalidating an offer before booking."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    valid: bool
    offer: dict[str, Any] | None = None
    price_per_person: float | None = None
    total_price: float | None = None
    currency: str | None = None
    expires_at: str | None = None
    error: str | None = None


# ============ Drafts ============


class DraftPassenger(BaseModel):
    """Passenger as entered on the passenger tab."""

    traveler_id: UUID | None = None
    given_name: str = Field(..., min_length=1, max_length=100)
    family_name: str = Field(..., min_length=1, max_length=100)
    born_on: date
    gender: Gender
    title: Title
    email: EmailStr
    phone_number: str = Field(..., min_length=4, max_length=30)


class FlightBookingDraftCreate(BaseModel):
    """Start booking an offer for a trip."""

    offer_id: str = Field(..., min_length=1, max_length=100)


class FlightBookingDraftUpdate(BaseModel):
    """Patch from one of the booking tabs; unset fields are left alone."""

    passengers: list[DraftPassenger] | None = None
    seat_selections: list[dict[str, Any]] | None = None
    baggage: list[dict[str, Any]] | None = None
    policy_acknowledged: bool | None = None


class FlightBookingDraftResponse(BaseModel):
    """Schema for FlightBookingDraft response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    offer_id: str
    flight: dict[str, Any] | None = None
    passengers: list[dict[str, Any]]
    seat_selections: list[dict[str, Any]]
    baggage: list[dict[str, Any]]
    policy_acknowledged: bool
    expires_at: datetime | None = None
    total_amount: float
    currency: str
    created_at: datetime
    updated_at: datetime


# ============ Bookings ============


class FlightBookingResponse(BaseModel):
    """Schema for FlightBooking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID | None = None
    duffel_order_id: str
    booking_reference: str | None = None
    total_amount: float
    currency: str
    outbound_flight: dict[str, Any]
    return_flight: dict[str, Any] | None = None
    passengers: list[dict[str, Any]]
    status: FlightBookingStatus
    confirmed_at: datetime | None = None
    confirmation_email_sent: bool
    created_at: datetime
