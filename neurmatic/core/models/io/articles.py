"""
Schema models for news articles and bookmarks.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ArticleStatusLiteral = Literal["draft", "published", "archived"]


class ArticleCreate(BaseModel):
    title: str = Field(min_length=5, max_length=255)
    summary: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list, max_length=20)
    status: ArticleStatusLiteral = "draft"


class ArticleUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=5, max_length=255)
    summary: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = Field(default=None, max_length=20)
    status: Optional[ArticleStatusLiteral] = None


class ArticleRead(BaseModel):
    id: str
    slug: str
    title: str
    summary: Optional[str] = None
    content: str
    category: Optional[str] = None
    tags: List[str]
    status: str
    author_id: str
    view_count: int
    bookmark_count: int
    published_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookmarkRead(BaseModel):
    id: str
    article_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
