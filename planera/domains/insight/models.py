"""SQLAlchemy models for the Insight domain."""

import enum
from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base


class InsightCategory(str, enum.Enum):
    """What a traveler tip is about."""

    FOOD = "food"
    TRANSPORT = "transport"
    NEIGHBORHOODS = "neighborhoods"
    TIMING = "timing"
    HIDDEN_GEM = "hidden_gem"
    AVOID = "avoid"
    OTHER = "other"


class Insight(Base):
    """A tip one traveler shares about a destination.

    Attributes:
        user_id: Author
        destination: Destination the tip is about, as typed
        content: The tip
        category: Topic
        verified: Author has a completed trip to the destination
        likes: Times other travelers liked it
    """

    __tablename__ = "insights"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    destination: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[InsightCategory] = mapped_column(
        Enum(InsightCategory, name="insight_category", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
