"""SQLAlchemy models for the Cart domain."""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base, JSONType


class CartStatus(str, enum.Enum):
    """Cart lifecycle. There is no payment step after checkout."""

    PENDING = "pending"
    CHECKOUT = "checkout"


class Cart(Base):
    """Bookable items a user collected for one trip.

    Attributes:
        user_id: Owner
        trip_id: Trip the items belong to
        items: Cart items, camelCase JSON objects identified by (name, type, day)
        total_amount: Sum of price * quantity over items
        currency: Currency of the first item added
        status: pending or checkout
    """

    __tablename__ = "carts"

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
    items: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)
    total_amount: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False),
        nullable=False,
        default=0,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    status: Mapped[CartStatus] = mapped_column(
        Enum(
            CartStatus,
            name="cart_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=CartStatus.PENDING,
    )

    __table_args__ = (UniqueConstraint("trip_id", "user_id", name="uq_carts_trip_user"),)
