"""
Admin analytics repository.

Aggregate counts across the platform for the admin overview.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict

from sqlalchemy import func
from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.articles import Article, ArticleStatus
from ..entities.forum import Topic, TopicStatus
from ..entities.jobs import Job, JobApplication, JobStatus
from ..entities.users import User


class AnalyticsRepository:
    """Read-only aggregate queries."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _scalar(self, stmt) -> int:
        return int((await self.session.execute(stmt)).scalar_one() or 0)

    async def count_users(self) -> int:
        return await self._scalar(sa_select(func.count(User.id)))

    async def count_users_by_role(self) -> Dict[str, int]:
        result = await self.session.execute(sa_select(User.role, func.count(User.id)).group_by(User.role))
        return {role: int(count) for role, count in result.all()}

    async def count_users_since(self, since: datetime) -> int:
        return await self._scalar(sa_select(func.count(User.id)).where(User.created_at >= since))

    async def count_active_jobs(self) -> int:
        return await self._scalar(
            sa_select(func.count(Job.id)).where((Job.status == JobStatus.ACTIVE) & (Job.is_deleted == False))  # noqa: E712
        )

    async def count_applications_by_status(self) -> Dict[str, int]:
        result = await self.session.execute(
            sa_select(JobApplication.status, func.count(JobApplication.id)).group_by(JobApplication.status)
        )
        return {status: int(count) for status, count in result.all()}

    async def count_published_articles(self) -> int:
        return await self._scalar(
            sa_select(func.count(Article.id)).where(
                (Article.status == ArticleStatus.PUBLISHED) & (Article.is_deleted == False)  # noqa: E712
            )
        )

    async def count_open_topics(self) -> int:
        return await self._scalar(
            sa_select(func.count(Topic.id)).where(
                (Topic.status == TopicStatus.OPEN) & (Topic.is_deleted == False)  # noqa: E712
            )
        )
