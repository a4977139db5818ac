"""SQLAlchemy models for the Trip domain."""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base, JSONType


class TripStatus(str, enum.Enum):
    """Generation status of a trip."""

    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class Trip(Base):
    """A planned trip and its generated itinerary.

    Attributes:
        user_id: Owner
        destination: Free-text destination ("Paris, France")
        origin: Free-text origin; generation falls back to DEFAULT_ORIGIN
        start_date: Epoch milliseconds
        end_date: Epoch milliseconds
        budget: Budget label as entered ("€2000", "Moderate")
        travelers: Number of travelers
        interests: Selected travel style tags
        skip_flights: Do not search flights
        skip_hotel: Do not search hotels
        preferred_flight_time: morning, afternoon, evening or any
        status: Generation status
        itinerary: Generated itinerary document, null unless completed
        error_message: Last generation failure
        generation_version: Bumped on every regeneration
        completed_at: When the current itinerary was stored
    """

    __tablename__ = "trips"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    origin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    budget: Mapped[str] = mapped_column(String(100), nullable=False)
    travelers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    interests: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    skip_flights: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    skip_hotel: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    preferred_flight_time: Mapped[str | None] = mapped_column(String(20), nullable=True)

    status: Mapped[TripStatus] = mapped_column(
        Enum(
            TripStatus,
            name="trip_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=TripStatus.GENERATING,
        index=True,
    )
    itinerary: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    generation_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("travelers >= 1", name="travelers_positive"),
        CheckConstraint("end_date >= start_date", name="valid_date_range"),
    )

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, destination={self.destination}, status={self.status})>"
