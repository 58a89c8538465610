"""
Recommendation feedback entity model.

One row per (user, item type, item). Negative feedback removes the item from
that user's future recommendations.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class RecommendationFeedback(Base, table=True):
    """Entity for feedback on a recommended item.

    Table: recommendation_feedback
    """

    __tablename__ = "recommendation_feedback"
    __table_args__ = (
        UniqueConstraint("user_id", "item_type", "item_id", name="uq_recommendation_feedback_item"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    item_type: str = Field(max_length=20)
    item_id: str = Field(max_length=64)
    feedback: str = Field(max_length=20)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
