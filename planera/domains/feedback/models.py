"""SQLAlchemy models for the Feedback domain."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from planera.infra.database import Base


class Feedback(Base):
    """A message sent from the app's feedback screen.

    Attributes:
        user_id: Sender when signed in; kept null after the user is deleted
        type: Kind of feedback as chosen in the app ("bug", "feature", ...)
        title: Short summary
        message: Body
        email: Reply address, if the sender gave one
    """

    __tablename__ = "feedback"

    user_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
