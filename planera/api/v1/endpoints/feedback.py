"""Feedback API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import OptionalUser
from planera.domains.feedback.schemas import FeedbackCreate, FeedbackResponse
from planera.domains.feedback.service import FeedbackService
from planera.infra.database import get_db

router = APIRouter(prefix="/feedback", tags=["Feedback"])


def get_feedback_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> FeedbackService:
    """Dependency for getting FeedbackService."""
    return FeedbackService(session)


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send feedback",
)
async def submit_feedback(
    data: FeedbackCreate,
    user: OptionalUser,
    service: Annotated[FeedbackService, Depends(get_feedback_service)],
) -> FeedbackResponse:
    """Send feedback, signed in or not."""
    return FeedbackResponse.model_validate(await service.submit(data, user))
