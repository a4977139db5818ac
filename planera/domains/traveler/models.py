"""SQLAlchemy models for the Traveler domain."""

import enum
from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base


class Gender(str, enum.Enum):
    """Gender as printed in the passport."""

    MALE = "male"
    FEMALE = "female"


class Traveler(Base):
    """A saved passenger profile.

    Age and passenger type depend on the departure date, so they are
    computed when needed and never stored.

    Attributes:
        user_id: Owner
        first_name: Given name as in the passport
        last_name: Family name as in the passport
        date_of_birth: Date of birth
        gender: male or female
        passport_number: Passport number
        passport_issuing_country: ISO country code of the issuer
        passport_expiry_date: Passport expiry
        email: Contact email
        phone_country_code: Dialling prefix, e.g. +30
        phone_number: Phone number without prefix
        is_default: Preselected passenger; at most one per user
    """

    __tablename__ = "travelers"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, name="gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    passport_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    passport_issuing_country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    passport_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
