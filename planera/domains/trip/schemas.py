"""Pydantic schemas for the Trip domain.

``ItineraryDocument`` validates the JSON stored in ``trips.itinerary``.
Its keys are camelCase on the wire because the mobile app reads the
document as-is.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from planera.domains.trip.models import TripStatus
from planera.domains.user.models import PlanType

FlightTime = Literal["morning", "afternoon", "evening", "any"]


# ============ Itinerary Document ============


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class SkippedSection(_CamelModel):
    """Marker stored instead of a list when the user opted out of a category."""

    skipped: Literal[True] = True


class DayActivity(_CamelModel):
    """One slot in a day plan. Meal slots also carry restaurant details."""

    time: str = Field(..., description="HH:MM, 24h clock")
    title: str
    description: str = ""
    type: str = "activity"
    price: str | None = None

    restaurant: str | None = None
    cuisine: str | None = None
    rating: str | float | None = None
    address: str | None = None
    booking_url: str | None = None


class DayPlan(_CamelModel):
    """A single itinerary day."""

    day: int = Field(..., ge=1)
    date: str | None = Field(None, description="YYYY-MM-DD")
    title: str
    activities: list[DayActivity] = Field(default_factory=list)


class DailyExpenses(_CamelModel):
    """Estimated spend per day, in ``currency``."""

    accommodation: float
    food: float
    activities: float
    transportation: float
    total: float
    currency: str = "EUR"


class StyleHighlight(_CamelModel):
    """Activities in the plan that match one of the user's travel styles."""

    style: str
    label: str
    recommendations: list[str] = Field(default_factory=list)
    count: int = 0


class Photo(_CamelModel):
    """Hotlinked cover photo with the photographer credit."""

    url: str
    url_small: str | None = None
    url_thumb: str | None = None
    unsplash_photo_id: str | None = None
    description: str | None = None
    photographer_name: str | None = None
    photographer_username: str | None = None
    photographer_url: str | None = None
    unsplash_url: str | None = None


class ItineraryDocument(_CamelModel):
    """The generated itinerary stored on a trip."""

    flights: list[dict[str, Any]] | SkippedSection = Field(default_factory=list)
    hotels: list[dict[str, Any]] | SkippedSection = Field(default_factory=list)
    activities: list[dict[str, Any]] = Field(default_factory=list)
    restaurants: list[dict[str, Any]] = Field(default_factory=list)
    transportation: list[dict[str, Any]] = Field(default_factory=list)
    day_by_day_itinerary: list[DayPlan] = Field(default_factory=list)
    estimated_daily_expenses: DailyExpenses | None = None
    style_based_highlights: list[StyleHighlight] = Field(default_factory=list)
    destination_image: Photo | None = None

    def to_storage(self) -> dict[str, Any]:
        """Serialize for the JSON column."""
        return self.model_dump(mode="json", by_alias=True)


# ============ Trip Schemas ============


class TripBase(BaseModel):
    """Fields shared by create and response."""

    destination: str = Field(..., min_length=1, max_length=255)
    origin: str | None = Field(None, max_length=255)
    start_date: int = Field(..., ge=0, description="Epoch milliseconds")
    end_date: int = Field(..., ge=0, description="Epoch milliseconds")
    budget: str = Field(..., min_length=1, max_length=100)
    travelers: int = Field(default=1, ge=1, le=20)
    interests: list[str] = Field(default_factory=list)
    skip_flights: bool = False
    skip_hotel: bool = False
    preferred_flight_time: FlightTime | None = None


class TripCreate(TripBase):
    """Schema for creating a trip."""

    @model_validator(mode="after")
    def check_dates(self) -> "TripCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripUpdate(BaseModel):
    """Partial update. Changing inputs does not regenerate on its own."""

    destination: str | None = Field(None, min_length=1, max_length=255)
    origin: str | None = Field(None, max_length=255)
    start_date: int | None = Field(None, ge=0)
    end_date: int | None = Field(None, ge=0)
    budget: str | None = Field(None, min_length=1, max_length=100)
    travelers: int | None = Field(None, ge=1, le=20)
    interests: list[str] | None = None
    skip_flights: bool | None = None
    skip_hotel: bool | None = None
    preferred_flight_time: FlightTime | None = None


class TripSummary(TripBase):
    """Trip as listed, without the itinerary body."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    status: TripStatus
    error_message: str | None = None
    generation_version: int
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TripResponse(TripSummary):
    """Full trip including the itinerary and the owner's plan."""

    itinerary: dict[str, Any] | None = None
    user_plan: PlanType | None = None
