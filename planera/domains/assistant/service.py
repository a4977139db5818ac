"""Travel assistant: one-shot answers to free-text travel questions."""

import logging

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from planera.core.config import settings
from planera.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

ASSISTANT_SYSTEM_PROMPT = (
    "You are a helpful travel assistant. Provide concise, practical advice about "
    "travel destinations, weather, activities, and travel tips. Keep responses "
    "friendly and informative."
)
EMPTY_ANSWER = "I couldn't generate a response. Please try again."

ASSISTANT_PROMPT = ChatPromptTemplate.from_messages(
    [("system", ASSISTANT_SYSTEM_PROMPT), ("human", "{question}")]
)


def get_assistant_llm() -> Runnable:
    """ChatOpenAI for conversational replies."""
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        api_key=settings.OPENAI_API_KEY,
        temperature=0.7,
        max_tokens=settings.ASSISTANT_MAX_TOKENS,
    )


class AssistantService:
    """Answers travel questions with the configured chat model."""

    def __init__(self, llm: Runnable | None = None) -> None:
        self.llm = llm

    async def ask(self, question: str) -> str:
        """Answer one question.

        Raises:
            UpstreamServiceError: If OpenAI is not configured or the call fails
        """
        llm = self.llm
        if llm is None:
            if not settings.OPENAI_API_KEY:
                raise UpstreamServiceError("Travel assistant is not configured")
            llm = get_assistant_llm()

        try:
            response = await llm.ainvoke(ASSISTANT_PROMPT.format_messages(question=question))
        except Exception as e:
            logger.error(f"Travel assistant call failed: {e}")
            raise UpstreamServiceError(f"Failed to get AI response: {e}")

        answer = response.content.strip() if isinstance(response.content, str) else ""
        return answer or EMPTY_ANSWER
