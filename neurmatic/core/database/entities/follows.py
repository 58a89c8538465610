"""
Follow relationship entity model.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Follow(Base, table=True):
    """``follower_id`` follows ``following_id``.

    Table: follows
    """

    __tablename__ = "follows"
    __table_args__ = (UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    follower_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    following_id: str = Field(foreign_key="users.id", index=True, max_length=64)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Follow(follower_id={self.follower_id}, following_id={self.following_id})"
