"""Pydantic schemas for the Traveler domain."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from planera.domains.traveler.models import Gender

PassengerType = Literal["adult", "child", "infant"]


class TravelerBase(BaseModel):
    """Base schema for Traveler."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    gender: Gender
    passport_number: str | None = Field(None, max_length=50)
    passport_issuing_country: str | None = Field(None, min_length=2, max_length=2)
    passport_expiry_date: date | None = None
    email: EmailStr | None = None
    phone_country_code: str | None = Field(None, max_length=8)
    phone_number: str | None = Field(None, max_length=30)

    @field_validator("passport_issuing_country")
    @classmethod
    def upper_country(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class TravelerCreate(TravelerBase):
    """Schema for creating a Traveler."""

    is_default: bool = False


class TravelerUpdate(BaseModel):
    """Schema for updating a Traveler."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    date_of_birth: date | None = None
    gender: Gender | None = None
    passport_number: str | None = Field(None, max_length=50)
    passport_issuing_country: str | None = Field(None, min_length=2, max_length=2)
    passport_expiry_date: date | None = None
    email: EmailStr | None = None
    phone_country_code: str | None = Field(None, max_length=8)
    phone_number: str | None = Field(None, max_length=30)
    is_default: bool | None = None


class TravelerResponse(TravelerBase):
    """Schema for Traveler response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    is_default: bool
    email: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingReadiness(BaseModel):
    """Whether a traveler can be booked, and what is missing if not."""

    ready: bool
    missing_fields: list[str] = Field(default_factory=list)


class TravelersWithAgesRequest(BaseModel):
    """Travelers to price for a departure date."""

    traveler_ids: list[UUID] = Field(..., min_length=1)
    departure_date: date


class TravelerWithAge(TravelerResponse):
    """Traveler plus age and passenger type at the departure date."""

    age: int
    passenger_type: PassengerType
