"""
News repositories: articles and bookmarks.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.articles import Article, ArticleStatus, Bookmark
from .base import SQLModelRepository


class ArticleRepository(SQLModelRepository[Article]):
    """Repository for news articles. Soft-deleted articles are invisible to lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Article)

    async def get_visible(self, article_id: str) -> Optional[Article]:
        stmt = select(Article).where((Article.id == article_id) & (Article.is_deleted == False))  # noqa: E712
        return await self._first(stmt)

    async def get_by_slug(self, slug: str) -> Optional[Article]:
        stmt = select(Article).where((Article.slug == slug) & (Article.is_deleted == False))  # noqa: E712
        return await self._first(stmt)

    async def slug_exists(self, slug: str) -> bool:
        # Soft-deleted rows still hold their slug
        return await self._first(select(Article).where(Article.slug == slug)) is not None

    async def list_published(
        self,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Tuple[List[Article], int]:
        stmt = select(Article).where(
            (Article.status == ArticleStatus.PUBLISHED) & (Article.is_deleted == False)  # noqa: E712
        )
        if category:
            stmt = stmt.where(Article.category == category)
        stmt = stmt.order_by(Article.published_at.desc())  # type: ignore[union-attr]
        if tag is None:
            return await self._page(stmt, limit, offset)

        # Tags live in a JSON column, filter them in Python
        wanted = tag.lower()
        tagged = [article for article in await self._all(stmt) if wanted in {t.lower() for t in article.tags}]
        return tagged[offset : offset + limit], len(tagged)

    async def latest_published(self, limit: int) -> List[Article]:
        stmt = (
            select(Article)
            .where((Article.status == ArticleStatus.PUBLISHED) & (Article.is_deleted == False))  # noqa: E712
            .order_by(Article.published_at.desc())  # type: ignore[union-attr]
            .limit(limit)
        )
        return await self._all(stmt)

    async def increment_view_count(self, article: Article) -> Article:
        await self.session.execute(
            sa_update(Article).where(Article.id == article.id).values(view_count=Article.view_count + 1)
        )
        await self.session.commit()
        await self.session.refresh(article)
        return article

    async def adjust_bookmark_count(self, article_id: str, delta: int) -> None:
        await self.session.execute(
            sa_update(Article)
            .where(Article.id == article_id)
            .values(bookmark_count=Article.bookmark_count + delta)
        )
        await self.session.commit()


class BookmarkRepository(SQLModelRepository[Bookmark]):
    """Repository for article bookmarks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Bookmark)

    async def get_for_user_and_article(self, user_id: str, article_id: str) -> Optional[Bookmark]:
        stmt = select(Bookmark).where((Bookmark.user_id == user_id) & (Bookmark.article_id == article_id))
        return await self._first(stmt)

    async def list_for_user(self, user_id: str) -> List[Bookmark]:
        stmt = select(Bookmark).where(Bookmark.user_id == user_id).order_by(Bookmark.created_at.desc())  # type: ignore[attr-defined]
        return await self._all(stmt)
