"""
Schema models for forum topics, votes and replies.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TopicType = Literal["discussion", "question", "showcase", "tutorial"]
TopicStatusLiteral = Literal["open", "closed", "resolved", "archived"]


class TopicCreate(BaseModel):
    title: str = Field(min_length=5, max_length=255)
    content: str = Field(min_length=10)
    category: str = Field(min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list, max_length=10)
    type: TopicType = "discussion"


class TopicUpdate(BaseModel):
    """Schema for updating a topic. ``status`` and ``is_locked`` are moderator-only."""

    title: Optional[str] = Field(default=None, min_length=5, max_length=255)
    content: Optional[str] = Field(default=None, min_length=10)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = Field(default=None, max_length=10)
    type: Optional[TopicType] = None
    status: Optional[TopicStatusLiteral] = None
    is_locked: Optional[bool] = None


class TopicRead(BaseModel):
    id: str
    slug: str
    title: str
    content: str
    category: str
    tags: List[str]
    type: str
    status: str
    author_id: str
    is_locked: bool
    view_count: int
    reply_count: int
    upvote_count: int
    downvote_count: int
    vote_score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VoteRequest(BaseModel):
    value: Literal[1, -1, 0]


class VoteResult(BaseModel):
    topic_id: str
    user_vote: int
    upvote_count: int
    downvote_count: int
    vote_score: int


class ReplyCreate(BaseModel):
    content: str = Field(min_length=1, max_length=10000)
    parent_reply_id: Optional[str] = None


class ReplyUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=10000)


class ReplyRead(BaseModel):
    id: str
    topic_id: str
    author_id: str
    parent_reply_id: Optional[str]
    content: str
    depth: int
    edited_at: Optional[datetime]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
