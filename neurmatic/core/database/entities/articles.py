"""
News entity models: articles and member bookmarks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ArticleStatus:
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ArticleBase(Base):
    """Base fields for article entity."""

    title: str = Field(max_length=255)
    summary: Optional[str] = Field(default=None, max_length=500)
    content: str
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    tags: list[str] = Field(default_factory=list, sa_type=JSON)
    status: str = Field(default=ArticleStatus.DRAFT, max_length=20, index=True)


class Article(ArticleBase, table=True):
    """Entity for a news article.

    Table: articles
    """

    __tablename__ = "articles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    slug: str = Field(max_length=280, unique=True, index=True)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    view_count: int = Field(default=0)
    bookmark_count: int = Field(default=0)
    published_at: Optional[datetime] = Field(sa_type=DateTime, default=None, index=True)
    is_deleted: bool = Field(default=False)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Article(id={self.id}, slug={self.slug}, status={self.status})"


class Bookmark(Base, table=True):
    """An article bookmarked by a member."""

    __tablename__ = "bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "article_id", name="uq_bookmark_user_article"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    article_id: str = Field(foreign_key="articles.id", index=True, max_length=64)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
