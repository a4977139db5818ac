"""Pydantic schemas for the travel assistant."""

from pydantic import BaseModel, Field


class AssistantQuestion(BaseModel):
    """A free-text travel question."""

    question: str = Field(..., min_length=1, max_length=2000)


class AssistantAnswer(BaseModel):
    answer: str
