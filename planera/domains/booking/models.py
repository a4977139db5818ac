"""SQLAlchemy models for the flight booking flow."""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base, JSONType


class FlightBookingStatus(str, enum.Enum):
    """Status of a placed flight order."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class FlightBookingDraft(Base):
    """Booking in progress, filled in tab by tab and consumed by submission.

    Attributes:
        user_id: Owner
        trip_id: Trip the flight belongs to
        offer_id: Duffel offer being booked
        offer_passenger_ids: Passenger ids Duffel assigned to the offer
        flight: Flight option snapshot (legs, prices) of the offer
        passengers: Passenger details entered so far
        seat_selections: Chosen seats per passenger and segment
        baggage: Extra baggage per passenger
        policy_acknowledged: Fare conditions accepted
        expires_at: Offer expiry; drives the countdown and blocks late submits
        total_amount: Offer total when the draft was created
        currency: Offer currency
    """

    __tablename__ = "flight_booking_drafts"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trip_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    offer_id: Mapped[str] = mapped_column(String(100), nullable=False)
    offer_passenger_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    flight: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    passengers: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)
    seat_selections: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)
    baggage: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)
    policy_acknowledged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")


class FlightBooking(Base):
    """A flight order placed with Duffel.

    Attributes:
        user_id: Owner
        trip_id: Trip the flight was booked for; kept null if the trip is deleted
        duffel_order_id: Duffel order id
        booking_reference: Airline booking reference (PNR)
        total_amount: Amount paid
        currency: Currency paid in
        outbound_flight: Outbound leg snapshot
        return_flight: Return leg snapshot, if any
        passengers: Given name, family name and email per passenger
        status: Order status
        confirmed_at: When the order was confirmed
        confirmation_email_sent: Whether the confirmation email went out
    """

    __tablename__ = "flight_bookings"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trip_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("trips.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    duffel_order_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    booking_reference: Mapped[str | None] = mapped_column(String(20), nullable=True)
    total_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    outbound_flight: Mapped[dict] = mapped_column(JSONType, nullable=False)
    return_flight: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    passengers: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)

    status: Mapped[FlightBookingStatus] = mapped_column(
        Enum(
            FlightBookingStatus,
            name="flight_booking_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=FlightBookingStatus.PENDING_PAYMENT,
    )
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmation_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
