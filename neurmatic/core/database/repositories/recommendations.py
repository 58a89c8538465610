"""
Recommendation repositories.

``RecommendationFeedbackRepository`` stores explicit feedback on recommended
items. ``RecommendationDataRepository`` gathers the interaction signals the
ranking engine works from: bookmark overlap between members, what similar
members engaged with, candidate pools and trending content.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import distinct, func
from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from ..entities.articles import Article, ArticleStatus, Bookmark
from ..entities.follows import Follow
from ..entities.forum import Topic, TopicStatus, TopicVote
from ..entities.jobs import Job, JobApplication, JobSkill, JobStatus
from ..entities.recommendations import RecommendationFeedback
from ..entities.users import User, UserStatus
from .base import QueryBuilder, SQLModelRepository

NEGATIVE_FEEDBACK = ("dislike", "not_interested")


class RecommendationFeedbackRepository(SQLModelRepository[RecommendationFeedback]):
    """Repository for recommendation feedback (one row per user and item)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RecommendationFeedback)

    async def get_for_item(self, user_id: str, item_type: str, item_id: str) -> Optional[RecommendationFeedback]:
        stmt = select(RecommendationFeedback).where(
            (RecommendationFeedback.user_id == user_id)
            & (RecommendationFeedback.item_type == item_type)
            & (RecommendationFeedback.item_id == item_id)
        )
        return await self._first(stmt)

    async def upsert(self, user_id: str, item_type: str, item_id: str, feedback: str) -> RecommendationFeedback:
        existing = await self.get_for_item(user_id, item_type, item_id)
        if existing is None:
            return await self.create(
                RecommendationFeedback(user_id=user_id, item_type=item_type, item_id=item_id, feedback=feedback)
            )
        existing.feedback = feedback
        return await self.update(existing)

    async def negative_item_ids(self, user_id: str, item_type: str) -> Set[str]:
        stmt = select(RecommendationFeedback).where(
            (RecommendationFeedback.user_id == user_id)
            & (RecommendationFeedback.item_type == item_type)
            & (RecommendationFeedback.feedback.in_(NEGATIVE_FEEDBACK))  # type: ignore[attr-defined]
        )
        return {row.item_id for row in await self._all(stmt)}


class RecommendationDataRepository:
    """Read-only queries feeding the recommendation engine."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _scalars(self, stmt) -> list:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _pairs(self, stmt) -> List[Tuple[str, str]]:
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    # ------------------------------------------------------------------
    # Similar members
    # ------------------------------------------------------------------

    async def find_similar_users(
        self, user_id: str, min_shared: int = 3, limit: int = 50
    ) -> List[Tuple[str, float]]:
        """Members sharing at least ``min_shared`` bookmarked articles with ``user_id``.

        Similarity is the number of shared bookmarks divided by the user's own
        bookmark count. Returns ``(user_id, similarity)`` sorted by similarity.
        """
        own_count_stmt = sa_select(func.count(distinct(Bookmark.article_id))).where(Bookmark.user_id == user_id)
        own_count = int((await self.session.execute(own_count_stmt)).scalar_one())
        if own_count == 0:
            return []

        mine = aliased(Bookmark)
        theirs = aliased(Bookmark)
        shared = func.count(distinct(theirs.article_id))
        stmt = (
            sa_select(theirs.user_id, shared)
            .select_from(mine)
            .join(theirs, mine.article_id == theirs.article_id)
            .where(mine.user_id == user_id)
            .where(theirs.user_id != user_id)
            .group_by(theirs.user_id)
            .having(shared >= min_shared)
        )
        result = await self.session.execute(stmt)
        similar = [(other_id, int(count) / own_count) for other_id, count in result.all()]
        similar.sort(key=lambda pair: (-pair[1], pair[0]))
        return similar[:limit]

    # ------------------------------------------------------------------
    # Interactions of a set of members: (item_id, from_user_id)
    # ------------------------------------------------------------------

    async def bookmarks_by_users(self, user_ids: Sequence[str]) -> List[Tuple[str, str]]:
        if not user_ids:
            return []
        stmt = QueryBuilder.apply_in(sa_select(Bookmark.article_id, Bookmark.user_id), Bookmark.user_id, user_ids)
        return await self._pairs(stmt)

    async def upvotes_by_users(self, user_ids: Sequence[str]) -> List[Tuple[str, str]]:
        if not user_ids:
            return []
        stmt = QueryBuilder.apply_in(
            sa_select(TopicVote.topic_id, TopicVote.user_id).where(TopicVote.value > 0),
            TopicVote.user_id,
            user_ids,
        )
        return await self._pairs(stmt)

    async def applications_by_users(self, user_ids: Sequence[str]) -> List[Tuple[str, str]]:
        if not user_ids:
            return []
        stmt = QueryBuilder.apply_in(
            sa_select(JobApplication.job_id, JobApplication.user_id), JobApplication.user_id, user_ids
        )
        return await self._pairs(stmt)

    async def follows_by_users(self, user_ids: Sequence[str]) -> List[Tuple[str, str]]:
        if not user_ids:
            return []
        stmt = QueryBuilder.apply_in(sa_select(Follow.following_id, Follow.follower_id), Follow.follower_id, user_ids)
        return await self._pairs(stmt)

    # ------------------------------------------------------------------
    # The requesting member's own engagement
    # ------------------------------------------------------------------

    async def bookmarked_article_ids(self, user_id: str) -> Set[str]:
        return set(await self._scalars(sa_select(Bookmark.article_id).where(Bookmark.user_id == user_id)))

    async def voted_topic_ids(self, user_id: str, positive_only: bool = False) -> Set[str]:
        stmt = sa_select(TopicVote.topic_id).where(TopicVote.user_id == user_id)
        if positive_only:
            stmt = stmt.where(TopicVote.value > 0)
        return set(await self._scalars(stmt))

    async def applied_job_ids(self, user_id: str) -> Set[str]:
        return set(await self._scalars(sa_select(JobApplication.job_id).where(JobApplication.user_id == user_id)))

    async def followed_user_ids(self, user_id: str) -> Set[str]:
        return set(await self._scalars(sa_select(Follow.following_id).where(Follow.follower_id == user_id)))

    # ------------------------------------------------------------------
    # Candidate pools
    # ------------------------------------------------------------------

    async def published_articles(
        self, ids: Optional[Sequence[str]] = None, since: Optional[datetime] = None, limit: int = 200
    ) -> List[Article]:
        stmt = select(Article).where(
            (Article.status == ArticleStatus.PUBLISHED) & (Article.is_deleted == False)  # noqa: E712
        )
        if ids is not None:
            stmt = QueryBuilder.apply_in(stmt, Article.id, ids)
        if since is not None:
            stmt = stmt.where(Article.published_at >= since)  # type: ignore[operator]
        stmt = stmt.order_by(Article.published_at.desc()).limit(limit)  # type: ignore[union-attr]
        return await self._scalars(stmt)

    async def open_topics(
        self, ids: Optional[Sequence[str]] = None, since: Optional[datetime] = None, limit: int = 200
    ) -> List[Topic]:
        stmt = select(Topic).where((Topic.status == TopicStatus.OPEN) & (Topic.is_deleted == False))  # noqa: E712
        if ids is not None:
            stmt = QueryBuilder.apply_in(stmt, Topic.id, ids)
        if since is not None:
            stmt = stmt.where(Topic.created_at >= since)
        stmt = stmt.order_by(Topic.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        return await self._scalars(stmt)

    async def active_jobs(
        self, ids: Optional[Sequence[str]] = None, since: Optional[datetime] = None, limit: int = 200
    ) -> List[Job]:
        stmt = select(Job).where((Job.status == JobStatus.ACTIVE) & (Job.is_deleted == False))  # noqa: E712
        if ids is not None:
            stmt = QueryBuilder.apply_in(stmt, Job.id, ids)
        if since is not None:
            stmt = stmt.where(Job.created_at >= since)
        stmt = stmt.order_by(Job.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        return await self._scalars(stmt)

    async def active_users(self, ids: Sequence[str]) -> List[User]:
        if not ids:
            return []
        stmt = QueryBuilder.apply_in(select(User).where(User.status == UserStatus.ACTIVE), User.id, ids)
        return await self._scalars(stmt)

    async def job_skill_names(self, job_ids: Sequence[str]) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {job_id: [] for job_id in job_ids}
        if not job_ids:
            return grouped
        stmt = QueryBuilder.apply_in(sa_select(JobSkill.job_id, JobSkill.skill_name), JobSkill.job_id, job_ids)
        for job_id, name in await self._pairs(stmt):
            grouped.setdefault(job_id, []).append(name)
        return grouped

    # ------------------------------------------------------------------
    # Trending (ordered, most popular first)
    # ------------------------------------------------------------------

    async def trending_articles(self, since: datetime, limit: int = 20) -> List[Article]:
        stmt = (
            select(Article)
            .where((Article.status == ArticleStatus.PUBLISHED) & (Article.is_deleted == False))  # noqa: E712
            .where(Article.published_at >= since)  # type: ignore[operator]
            .order_by(Article.view_count.desc(), Article.bookmark_count.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def trending_topics(self, since: datetime, limit: int = 20) -> List[Topic]:
        stmt = (
            select(Topic)
            .where((Topic.status == TopicStatus.OPEN) & (Topic.is_deleted == False))  # noqa: E712
            .where(Topic.created_at >= since)
            .order_by(Topic.upvote_count.desc(), Topic.reply_count.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def trending_jobs(self, since: datetime, limit: int = 20) -> List[Job]:
        stmt = (
            select(Job)
            .where((Job.status == JobStatus.ACTIVE) & (Job.is_deleted == False))  # noqa: E712
            .where(Job.created_at >= since)
            .order_by(Job.view_count.desc(), Job.application_count.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._scalars(stmt)

    # ------------------------------------------------------------------
    # Interest signals
    # ------------------------------------------------------------------

    async def article_interest_tags(self, article_ids: Sequence[str]) -> List[str]:
        """Categories and tags of the given articles, whatever their status."""
        if not article_ids:
            return []
        stmt = QueryBuilder.apply_in(select(Article), Article.id, article_ids)
        interests: List[str] = []
        for article in await self._scalars(stmt):
            if article.category:
                interests.append(article.category)
            interests.extend(article.tags or [])
        return interests

    async def topic_interest_tags(self, topic_ids: Sequence[str]) -> List[str]:
        """Categories and tags of the given topics, whatever their status."""
        if not topic_ids:
            return []
        stmt = QueryBuilder.apply_in(select(Topic), Topic.id, topic_ids)
        interests: List[str] = []
        for topic in await self._scalars(stmt):
            interests.append(topic.category)
            interests.extend(topic.tags or [])
        return interests
