"""
Job board service.

Posting, searching, updating and closing jobs, plus saved jobs. Writes to a
job drop every cached match score computed against it.
"""

from typing import List, Optional, Tuple

from neurmatic.core.database.base import to_naive_utc, utc_now
from neurmatic.core.database.entities.jobs import Job, JobSkill, JobStatus, SavedJob
from neurmatic.core.database.entities.users import User
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.database.repositories.jobs import JobSearchFilters
from neurmatic.core.errors import ForbiddenError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.jobs import JobCreate, JobRead, JobSkillIn, JobSkillRead, JobUpdate, MatchScoreRead
from neurmatic.matching.scoring import MatchScore
from neurmatic.matching.service import MatchingService

from .companies import ensure_company_manager

logger = get_logger(__name__)

MATCH_SCAN_CAP = 500


def _skill_rows(skills: List[JobSkillIn]) -> List[JobSkill]:
    return [
        JobSkill(skill_name=skill.skill_name, required_level=skill.required_level, is_required=skill.is_required)
        for skill in skills
    ]


def to_job_read(job: Job, skills: List[JobSkill], match: Optional[MatchScore] = None) -> JobRead:
    read = JobRead.model_validate(job)
    read.skills = [JobSkillRead.model_validate(skill) for skill in skills]
    if match is not None:
        read.match_score = MatchScoreRead(score=match.score, breakdown=match.breakdown, explanation=match.explanation)
    return read


class JobService:
    def __init__(self, repos: SqlRepoBundle, matching: MatchingService) -> None:
        self.repos = repos
        self.matching = matching

    async def get_visible(self, job_id: str) -> Job:
        job = await self.repos.jobs.get_visible(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    async def ensure_job_manager(self, job: Job, user: User) -> None:
        company = await self.repos.companies.get_by_id(job.company_id)
        if company is None:
            raise NotFoundError("Company not found")
        ensure_company_manager(company, user)

    async def create(self, user: User, data: JobCreate) -> JobRead:
        company = await self.repos.companies.get_by_id(data.company_id)
        if company is None:
            raise NotFoundError("Company not found")
        ensure_company_manager(company, user)
        if not company.verified:
            raise ForbiddenError("Company must be verified before posting jobs")

        values = data.model_dump(exclude={"skills", "expires_at"})
        job = Job(**values, expires_at=to_naive_utc(data.expires_at))
        if job.status == JobStatus.ACTIVE:
            job.published_at = utc_now()
        job = await self.repos.jobs.create(job)

        skills = await self.repos.job_skills.replace_for_job(job.id, _skill_rows(data.skills))
        logger.info(f"Job created: id={job.id}, company={company.id}, status={job.status}")
        return to_job_read(job, skills)

    async def search(
        self,
        filters: JobSearchFilters,
        limit: int,
        offset: int,
        user: Optional[User] = None,
        with_match: bool = False,
        min_match_score: Optional[int] = None,
    ) -> Tuple[List[JobRead], int]:
        """
        Search jobs, optionally scoring each against ``user``.

        Filtering on ``min_match_score`` needs every candidate scored, so in that
        case up to ``MATCH_SCAN_CAP`` rows are scored and paginated in memory.
        """
        if user is None or not (with_match or min_match_score is not None):
            jobs, total = await self.repos.jobs.search(filters, limit, offset)
            skills = await self.repos.job_skills.list_for_jobs([job.id for job in jobs])
            return [to_job_read(job, skills.get(job.id, [])) for job in jobs], total

        if min_match_score is None:
            jobs, total = await self.repos.jobs.search(filters, limit, offset)
            scores = await self.matching.get_match_scores_for_jobs([job.id for job in jobs], user.id)
        else:
            candidates = await self.repos.jobs.search_all(filters, cap=MATCH_SCAN_CAP)
            scores = await self.matching.get_match_scores_for_jobs([job.id for job in candidates], user.id)
            matching_jobs = [
                job for job in candidates if job.id in scores and scores[job.id].score >= min_match_score
            ]
            total = len(matching_jobs)
            jobs = matching_jobs[offset : offset + limit]

        skills = await self.repos.job_skills.list_for_jobs([job.id for job in jobs])
        return [to_job_read(job, skills.get(job.id, []), scores.get(job.id)) for job in jobs], total

    async def get(self, job_id: str) -> JobRead:
        job = await self.get_visible(job_id)
        job = await self.repos.jobs.increment_view_count(job)
        skills = await self.repos.job_skills.list_for_job(job.id)
        return to_job_read(job, skills)

    async def match(self, job_id: str, user: User) -> MatchScore:
        await self.get_visible(job_id)
        return await self.matching.calculate_match_score(job_id, user.id)

    async def update(self, user: User, job_id: str, data: JobUpdate) -> JobRead:
        job = await self.get_visible(job_id)
        await self.ensure_job_manager(job, user)

        changes = data.model_dump(exclude_unset=True, exclude={"skills"})
        if "expires_at" in changes:
            changes["expires_at"] = to_naive_utc(data.expires_at)
        for field, value in changes.items():
            setattr(job, field, value)
        if job.status == JobStatus.ACTIVE and job.published_at is None:
            job.published_at = utc_now()
        job = await self.repos.jobs.update(job)

        if data.skills is not None:
            skills = await self.repos.job_skills.replace_for_job(job.id, _skill_rows(data.skills))
        else:
            skills = await self.repos.job_skills.list_for_job(job.id)

        await self.matching.invalidate_job_matches(job.id)
        return to_job_read(job, skills)

    async def delete(self, user: User, job_id: str) -> None:
        job = await self.get_visible(job_id)
        await self.ensure_job_manager(job, user)
        job.is_deleted = True
        job.status = JobStatus.CLOSED
        await self.repos.jobs.update(job)
        await self.matching.invalidate_job_matches(job.id)
        logger.info(f"Job soft-deleted: id={job.id}, by={user.id}")

    async def close_expired(self) -> int:
        """Close every active job whose ``expires_at`` has passed."""
        expired = await self.repos.jobs.list_expired_active(utc_now())
        for job in expired:
            job.status = JobStatus.CLOSED
            await self.repos.jobs.update(job)
            await self.matching.invalidate_job_matches(job.id)
        if expired:
            logger.info(f"Closed {len(expired)} expired jobs")
        return len(expired)

    # ------------------------------------------------------------------
    # Saved jobs
    # ------------------------------------------------------------------

    async def save(self, user: User, job_id: str) -> SavedJob:
        await self.get_visible(job_id)
        existing = await self.repos.saved_jobs.get_for_user_and_job(user.id, job_id)
        if existing is not None:
            return existing
        return await self.repos.saved_jobs.create(SavedJob(user_id=user.id, job_id=job_id))

    async def unsave(self, user: User, job_id: str) -> None:
        existing = await self.repos.saved_jobs.get_for_user_and_job(user.id, job_id)
        if existing is None:
            raise NotFoundError("Job is not saved")
        await self.repos.saved_jobs.delete(existing.id)

    async def list_saved(self, user: User) -> List[SavedJob]:
        return await self.repos.saved_jobs.list_for_user(user.id)
