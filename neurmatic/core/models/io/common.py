"""
Shared I/O models: pagination envelope and common literals.
"""

from __future__ import annotations

from typing import Generic, List, Literal, TypeVar

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")

JobType = Literal["full_time", "part_time", "contract", "freelance"]
WorkLocation = Literal["remote", "hybrid", "onsite"]
ExperienceLevel = Literal["entry", "junior", "mid", "senior", "lead", "principal"]
JobStatusLiteral = Literal["draft", "active", "paused", "closed", "filled"]
ApplicationStatusLiteral = Literal[
    "pending", "reviewed", "shortlisted", "interviewed", "offered", "accepted", "rejected", "withdrawn"
]
ItemType = Literal["article", "forum_topic", "job", "user"]
FeedbackValue = Literal["like", "dislike", "not_interested", "clicked"]


class Page(BaseModel, Generic[ItemT]):
    """One page of a listing."""

    items: List[ItemT]
    total: int = Field(description="Number of items matching the query across all pages")
    page: int
    limit: int


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit
