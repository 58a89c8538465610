"""
Forum entity models: topics, topic votes and replies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class TopicStatus:
    OPEN = "open"
    CLOSED = "closed"
    RESOLVED = "resolved"
    ARCHIVED = "archived"


class TopicBase(Base):
    """Base fields for topic entity."""

    title: str = Field(max_length=255)
    content: str
    category: str = Field(max_length=100, index=True)
    tags: list[str] = Field(default_factory=list, sa_type=JSON)
    type: str = Field(default="discussion", max_length=20)
    status: str = Field(default=TopicStatus.OPEN, max_length=20, index=True)


class Topic(TopicBase, table=True):
    """Entity for a forum topic.

    Table: topics
    """

    __tablename__ = "topics"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    slug: str = Field(max_length=280, unique=True, index=True)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    is_locked: bool = Field(default=False)
    view_count: int = Field(default=0)
    reply_count: int = Field(default=0)
    upvote_count: int = Field(default=0)
    downvote_count: int = Field(default=0)
    vote_score: int = Field(default=0)
    is_deleted: bool = Field(default=False)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Topic(id={self.id}, slug={self.slug}, status={self.status})"


class TopicVote(Base, table=True):
    """A member's vote on a topic: 1 (up) or -1 (down)."""

    __tablename__ = "topic_votes"
    __table_args__ = (UniqueConstraint("topic_id", "user_id", name="uq_topic_vote_topic_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    topic_id: str = Field(foreign_key="topics.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    value: int

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Reply(Base, table=True):
    """Entity for a reply on a forum topic.

    Table: replies

    ``depth`` is 0 for replies to the topic itself and grows by one for each
    nested reply under ``parent_reply_id``.
    """

    __tablename__ = "replies"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    topic_id: str = Field(foreign_key="topics.id", index=True, max_length=64)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    parent_reply_id: Optional[str] = Field(default=None, foreign_key="replies.id", max_length=64)
    content: str
    depth: int = Field(default=0)
    is_deleted: bool = Field(default=False)
    edited_at: Optional[datetime] = Field(sa_type=DateTime, default=None)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Reply(id={self.id}, topic_id={self.topic_id}, depth={self.depth})"
