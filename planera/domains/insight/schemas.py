"""Pydantic schemas for the Insight domain."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from planera.domains.insight.models import InsightCategory


class InsightCreate(BaseModel):
    destination: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=2000)
    category: InsightCategory


class InsightResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    destination: str
    content: str
    category: InsightCategory
    verified: bool
    likes: int
    created_at: datetime


class CompletedTrip(BaseModel):
    """A past trip the user can share insights about."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    destination: str
    start_date: int
    end_date: int
