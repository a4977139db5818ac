"""Travel assistant API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from planera.core.deps import ActiveUser
from planera.domains.assistant.schemas import AssistantAnswer, AssistantQuestion
from planera.domains.assistant.service import AssistantService

router = APIRouter(prefix="/assistant", tags=["Assistant"])


def get_assistant_service() -> AssistantService:
    """Dependency for getting AssistantService."""
    return AssistantService()


AssistantServiceDep = Annotated[AssistantService, Depends(get_assistant_service)]


@router.post("/ask", response_model=AssistantAnswer, summary="Ask the travel assistant")
async def ask(
    data: AssistantQuestion,
    user: ActiveUser,
    service: AssistantServiceDep,
) -> AssistantAnswer:
    """Concise travel advice for one question.

    Raises:
        502 Bad Gateway: If the assistant is unavailable
    """
    return AssistantAnswer(answer=await service.ask(data.question))
