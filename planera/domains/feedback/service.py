"""Services for the Feedback domain."""

import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.feedback.models import Feedback
from planera.domains.feedback.schemas import FeedbackCreate
from planera.domains.shared.repository import GenericRepository
from planera.domains.user.models import User

logger = logging.getLogger(__name__)


class FeedbackRepository(GenericRepository[Feedback, FeedbackCreate, BaseModel]):
    """Repository for Feedback persistence."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Feedback, session)


class FeedbackService:
    """Stores feedback; signing in is optional."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = FeedbackRepository(session)

    async def submit(self, data: FeedbackCreate, user: User | None = None) -> Feedback:
        """Store a feedback message, linked to the sender when known."""
        feedback = await self.repository.create(
            {**data.model_dump(), "user_id": user.id if user is not None else None}
        )
        await self.session.commit()
        logger.info(f"Received {data.type} feedback {feedback.id}")
        return feedback
