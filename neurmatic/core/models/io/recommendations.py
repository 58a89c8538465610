"""
Schema models for recommendations and feedback.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .common import FeedbackValue, ItemType


class RecommendationRead(BaseModel):
    type: str
    id: str
    relevance_score: int = Field(ge=0, le=100)
    explanation: str
    data: Dict[str, Any]


class FeedbackCreate(BaseModel):
    item_type: ItemType
    item_id: str = Field(min_length=1, max_length=64)
    feedback: FeedbackValue


class FeedbackRead(BaseModel):
    id: str
    item_type: str
    item_id: str
    feedback: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
