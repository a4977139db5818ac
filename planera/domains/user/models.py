"""SQLAlchemy models for the User domain.

Users sign in natively with Google or Apple; there are no passwords.
The plan columns track the free-tier trip allowance.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base


class AuthProvider(str, enum.Enum):
    """Native identity providers."""

    GOOGLE = "google"
    APPLE = "apple"


class PlanType(str, enum.Enum):
    """Subscription plan."""

    FREE = "free"
    PREMIUM = "premium"


class User(Base):
    """User model.

    Attributes:
        email: Email from the identity token (Apple may withhold it)
        full_name: Display name
        avatar_url: Profile picture URL
        provider: Identity provider that created the account
        social_id: The provider's stable subject identifier
        is_active: Whether the user account is active
        plan: Free or premium
        trips_generated: Trips created so far, counted against the free plan
        last_login_at: Timestamp of last successful sign-in
    """

    __tablename__ = "users"

    email: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        index=True,
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    provider: Mapped[AuthProvider] = mapped_column(
        SAEnum(AuthProvider, name="authprovider", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    social_id: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    plan: Mapped[PlanType] = mapped_column(
        SAEnum(PlanType, name="plantype", values_callable=lambda e: [m.value for m in e]),
        default=PlanType.FREE,
        nullable=False,
    )
    trips_generated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_users_provider_social_id", "provider", "social_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, provider={self.provider})>"

    @property
    def is_premium(self) -> bool:
        return self.plan == PlanType.PREMIUM
