"""
Job board repositories.

This module provides data access for job postings, job skill requirements,
applications and saved jobs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, or_
from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.jobs import Job, JobApplication, JobSkill, JobStatus, SavedJob
from .base import QueryBuilder, SQLModelRepository

SORTABLE_JOB_FIELDS = {
    "published_at": Job.published_at,
    "salary_max": Job.salary_max,
    "view_count": Job.view_count,
}


@dataclass
class JobSearchFilters:
    """Filters accepted by :meth:`JobRepository.search`. ``None`` means no filter."""

    status: Optional[str] = JobStatus.ACTIVE
    job_type: Optional[str] = None
    work_location: Optional[str] = None
    experience_level: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[int] = None
    search: Optional[str] = None
    company_id: Optional[str] = None
    sort_by: str = "published_at"


class JobRepository(SQLModelRepository[Job]):
    """Repository for job postings. Soft-deleted jobs are invisible to lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Job)

    async def get_visible(self, job_id: str) -> Optional[Job]:
        stmt = select(Job).where((Job.id == job_id) & (Job.is_deleted == False))  # noqa: E712
        return await self._first(stmt)

    def _search_statement(self, filters: JobSearchFilters):
        stmt = select(Job).where(Job.is_deleted == False)  # noqa: E712
        stmt = QueryBuilder.apply_filters(
            stmt,
            Job,
            {
                "status": filters.status,
                "job_type": filters.job_type,
                "work_location": filters.work_location,
                "experience_level": filters.experience_level,
                "company_id": filters.company_id,
            },
        )
        if filters.location:
            stmt = stmt.where(func.lower(Job.location).contains(filters.location.lower()))
        if filters.salary_min is not None:
            stmt = stmt.where(
                or_(
                    Job.salary_max >= filters.salary_min,
                    and_(Job.salary_max.is_(None), Job.salary_min >= filters.salary_min),  # type: ignore[union-attr]
                )
            )
        if filters.search:
            term = f"%{filters.search.lower()}%"
            stmt = stmt.where(or_(func.lower(Job.title).like(term), func.lower(Job.description).like(term)))

        sort_column = SORTABLE_JOB_FIELDS.get(filters.sort_by, Job.published_at)
        return stmt.order_by(sort_column.desc(), Job.created_at.desc())  # type: ignore[union-attr]

    async def search(self, filters: JobSearchFilters, limit: int, offset: int) -> Tuple[List[Job], int]:
        """Filtered, sorted page of jobs plus the total number of matches."""
        return await self._page(self._search_statement(filters), limit, offset)

    async def search_all(self, filters: JobSearchFilters, cap: int = 500) -> List[Job]:
        """Every job matching the filters, up to ``cap`` rows."""
        return await self._all(self._search_statement(filters).limit(cap))

    async def increment_view_count(self, job: Job) -> Job:
        await self.session.execute(
            sa_update(Job).where(Job.id == job.id).values(view_count=Job.view_count + 1)
        )
        await self.session.commit()
        await self.session.refresh(job)
        return job

    async def increment_application_count(self, job_id: str) -> None:
        await self.session.execute(
            sa_update(Job).where(Job.id == job_id).values(application_count=Job.application_count + 1)
        )
        await self.session.commit()

    async def list_expired_active(self, now: datetime) -> List[Job]:
        stmt = select(Job).where(
            (Job.status == JobStatus.ACTIVE)
            & (Job.is_deleted == False)  # noqa: E712
            & (Job.expires_at.is_not(None))  # type: ignore[union-attr]
            & (Job.expires_at < now)  # type: ignore[operator]
        )
        return await self._all(stmt)

    async def list_active(self, limit: int = 1000) -> List[Job]:
        stmt = (
            select(Job)
            .where((Job.status == JobStatus.ACTIVE) & (Job.is_deleted == False))  # noqa: E712
            .order_by(Job.published_at.desc())  # type: ignore[union-attr]
            .limit(limit)
        )
        return await self._all(stmt)

    async def get_many(self, job_ids: Sequence[str]) -> List[Job]:
        if not job_ids:
            return []
        stmt = QueryBuilder.apply_in(select(Job), Job.id, job_ids).where(Job.is_deleted == False)  # noqa: E712
        return await self._all(stmt)


class JobSkillRepository(SQLModelRepository[JobSkill]):
    """Repository for job skill requirements."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobSkill)

    async def list_for_job(self, job_id: str) -> List[JobSkill]:
        stmt = select(JobSkill).where(JobSkill.job_id == job_id)
        return await self._all(stmt)

    async def list_for_jobs(self, job_ids: Sequence[str]) -> Dict[str, List[JobSkill]]:
        grouped: Dict[str, List[JobSkill]] = {job_id: [] for job_id in job_ids}
        if not job_ids:
            return grouped
        stmt = QueryBuilder.apply_in(select(JobSkill), JobSkill.job_id, job_ids)
        for skill in await self._all(stmt):
            grouped.setdefault(skill.job_id, []).append(skill)
        return grouped

    async def replace_for_job(self, job_id: str, skills: Sequence[JobSkill]) -> List[JobSkill]:
        await self.session.execute(sa_delete(JobSkill).where(JobSkill.job_id == job_id))
        rows = []
        for skill in skills:
            skill.job_id = job_id
            self.session.add(skill)
            rows.append(skill)
        await self.session.commit()
        return rows


class JobApplicationRepository(SQLModelRepository[JobApplication]):
    """Repository for job applications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobApplication)

    async def get_for_job_and_user(self, job_id: str, user_id: str) -> Optional[JobApplication]:
        stmt = select(JobApplication).where((JobApplication.job_id == job_id) & (JobApplication.user_id == user_id))
        return await self._first(stmt)

    async def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[JobApplication]:
        stmt = select(JobApplication).where(JobApplication.user_id == user_id)
        if status:
            stmt = stmt.where(JobApplication.status == status)
        return await self._all(stmt.order_by(JobApplication.created_at.desc()))  # type: ignore[attr-defined]

    async def list_for_job(self, job_id: str, status: Optional[str] = None) -> List[JobApplication]:
        stmt = select(JobApplication).where(JobApplication.job_id == job_id)
        if status:
            stmt = stmt.where(JobApplication.status == status)
        return await self._all(stmt.order_by(JobApplication.created_at.desc()))  # type: ignore[attr-defined]


class SavedJobRepository(SQLModelRepository[SavedJob]):
    """Repository for saved jobs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SavedJob)

    async def get_for_user_and_job(self, user_id: str, job_id: str) -> Optional[SavedJob]:
        stmt = select(SavedJob).where((SavedJob.user_id == user_id) & (SavedJob.job_id == job_id))
        return await self._first(stmt)

    async def list_for_user(self, user_id: str) -> List[SavedJob]:
        stmt = select(SavedJob).where(SavedJob.user_id == user_id).order_by(SavedJob.created_at.desc())  # type: ignore[attr-defined]
        return await self._all(stmt)
