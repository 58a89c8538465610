"""
Forum repositories: topics, votes and replies.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.forum import Reply, Topic, TopicStatus, TopicVote
from .base import QueryBuilder, SQLModelRepository


class TopicRepository(SQLModelRepository[Topic]):
    """Repository for forum topics. Soft-deleted topics are invisible to lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Topic)

    async def get_visible(self, topic_id: str) -> Optional[Topic]:
        stmt = select(Topic).where((Topic.id == topic_id) & (Topic.is_deleted == False))  # noqa: E712
        return await self._first(stmt)

    async def slug_exists(self, slug: str) -> bool:
        return await self._first(select(Topic).where(Topic.slug == slug)) is not None

    async def list_page(
        self,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        topic_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Topic], int]:
        stmt = select(Topic).where(Topic.is_deleted == False)  # noqa: E712
        stmt = QueryBuilder.apply_filters(stmt, Topic, {"category": category, "type": topic_type, "status": status})
        stmt = stmt.order_by(Topic.created_at.desc())  # type: ignore[attr-defined]
        return await self._page(stmt, limit, offset)

    async def increment_view_count(self, topic: Topic) -> Topic:
        await self.session.execute(
            sa_update(Topic).where(Topic.id == topic.id).values(view_count=Topic.view_count + 1)
        )
        await self.session.commit()
        await self.session.refresh(topic)
        return topic

    async def adjust_reply_count(self, topic_id: str, delta: int) -> None:
        await self.session.execute(
            sa_update(Topic).where(Topic.id == topic_id).values(reply_count=Topic.reply_count + delta)
        )
        await self.session.commit()

    async def list_open(self, limit: int = 1000) -> List[Topic]:
        stmt = (
            select(Topic)
            .where((Topic.status == TopicStatus.OPEN) & (Topic.is_deleted == False))  # noqa: E712
            .order_by(Topic.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._all(stmt)


class TopicVoteRepository(SQLModelRepository[TopicVote]):
    """Repository for topic votes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TopicVote)

    async def get_for_topic_and_user(self, topic_id: str, user_id: str) -> Optional[TopicVote]:
        stmt = select(TopicVote).where((TopicVote.topic_id == topic_id) & (TopicVote.user_id == user_id))
        return await self._first(stmt)

    async def list_for_topic(self, topic_id: str) -> List[TopicVote]:
        return await self._all(select(TopicVote).where(TopicVote.topic_id == topic_id))


class ReplyRepository(SQLModelRepository[Reply]):
    """Repository for topic replies. Soft-deleted replies are invisible to lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Reply)

    async def get_visible(self, reply_id: str) -> Optional[Reply]:
        stmt = select(Reply).where((Reply.id == reply_id) & (Reply.is_deleted == False))  # noqa: E712
        return await self._first(stmt)

    async def list_for_topic(self, topic_id: str, limit: int, offset: int) -> Tuple[List[Reply], int]:
        """Visible replies of a topic, oldest first."""
        stmt = (
            select(Reply)
            .where((Reply.topic_id == topic_id) & (Reply.is_deleted == False))  # noqa: E712
            .order_by(Reply.created_at.asc(), Reply.id.asc())  # type: ignore[attr-defined]
        )
        return await self._page(stmt, limit, offset)
