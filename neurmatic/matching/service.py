"""Match score service.

Loads a job and a candidate through the repositories, scores them with
:func:`neurmatic.matching.scoring.calculate_match` and keeps the result in the
cache under ``match_score:{user_id}:{job_id}`` until the TTL passes or a write
to either side invalidates it.
"""

from __future__ import annotations

from typing import Dict, Iterable

from neurmatic.core.cache import CacheStore
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import NeurmaticError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.monitoring import log_error, log_match_computed

from .scoring import (
    CandidatePreferences,
    CandidateSkill,
    CandidateSnapshot,
    JobSkillRequirement,
    JobSnapshot,
    MatchScore,
    calculate_match,
)

logger = get_logger(__name__)

MATCH_KEY_PREFIX = "match_score"


def match_cache_key(user_id: str, job_id: str) -> str:
    return f"{MATCH_KEY_PREFIX}:{user_id}:{job_id}"


class MatchingService:
    """Computes, caches and invalidates job/candidate match scores."""

    def __init__(self, repos: SqlRepoBundle, cache: CacheStore, ttl_seconds: int) -> None:
        self.repos = repos
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def calculate_match_score(self, job_id: str, user_id: str) -> MatchScore:
        """
        Get the match score of a user for a job.

        Args:
            job_id: Job to score against
            user_id: Candidate to score

        Returns:
            The cached or freshly computed MatchScore

        Raises:
            NotFoundError: If the job or the user does not exist
        """
        key = match_cache_key(user_id, job_id)
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for match score: job={job_id}, user={user_id}")
            match = MatchScore.from_dict(cached)
            log_match_computed(job_id, user_id, match.score, cached=True)
            return match

        try:
            job = await self._load_job(job_id)
            candidate = await self._load_candidate(user_id)
            match = calculate_match(job, candidate)
        except NeurmaticError:
            raise
        except Exception as e:
            logger.error(f"Failed to calculate match score: job={job_id}, user={user_id}: {e}", exc_info=True)
            log_error(
                "MatchScoreError",
                str(e),
                {"service": "MatchingService", "job_id": job_id, "user_id": user_id},
            )
            raise

        await self.cache.set(key, match.to_dict(), ttl=self.ttl_seconds)
        log_match_computed(job_id, user_id, match.score, cached=False)
        return match

    async def get_match_scores_for_jobs(self, job_ids: Iterable[str], user_id: str) -> Dict[str, MatchScore]:
        """Score several jobs for one user. Jobs that fail to score are skipped."""
        scores: Dict[str, MatchScore] = {}
        for job_id in job_ids:
            try:
                scores[job_id] = await self.calculate_match_score(job_id, user_id)
            except Exception as e:
                logger.warning(f"Skipping match score for job {job_id}: {e}")
        return scores

    async def invalidate_match_score(self, job_id: str, user_id: str) -> None:
        await self.cache.delete(match_cache_key(user_id, job_id))

    async def invalidate_user_matches(self, user_id: str) -> int:
        removed = await self.cache.delete_pattern(f"{MATCH_KEY_PREFIX}:{user_id}:*")
        if removed:
            logger.info(f"Invalidated {removed} match scores for user {user_id}")
        return removed

    async def invalidate_job_matches(self, job_id: str) -> int:
        removed = await self.cache.delete_pattern(f"{MATCH_KEY_PREFIX}:*:{job_id}")
        if removed:
            logger.info(f"Invalidated {removed} match scores for job {job_id}")
        return removed

    # ------------------------------------------------------------------
    # Snapshot loading
    # ------------------------------------------------------------------

    async def _load_job(self, job_id: str) -> JobSnapshot:
        job = await self.repos.jobs.get_visible(job_id)
        if job is None:
            raise NotFoundError("Job not found")

        skills = await self.repos.job_skills.list_for_job(job.id)
        company = await self.repos.companies.get_by_id(job.company_id)
        return JobSnapshot(
            job_id=job.id,
            skills=[
                JobSkillRequirement(
                    name=skill.skill_name, required_level=skill.required_level, is_required=skill.is_required
                )
                for skill in skills
            ],
            primary_llms=list(job.primary_llms or []),
            frameworks=list(job.frameworks or []),
            programming_languages=list(job.programming_languages or []),
            experience_level=job.experience_level,
            work_location=job.work_location,
            location=job.location,
            salary_min=job.salary_min,
            salary_max=job.salary_max,
            company_benefits=list(company.benefits or []) if company else [],
        )

    async def _load_candidate(self, user_id: str) -> CandidateSnapshot:
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        skills = await self.repos.skills.list_for_user(user_id)
        models = await self.repos.models.list_for_user(user_id)
        experiences = await self.repos.experiences.list_for_user(user_id)
        profile = await self.repos.profiles.get_by_user_id(user_id)
        prefs = await self.repos.preferences.get_by_user_id(user_id)

        frameworks: list[str] = []
        languages: list[str] = []
        for experience in experiences[:1]:
            stack = experience.tech_stack or {}
            frameworks.extend(stack.get("frameworks") or [])
            languages.extend(stack.get("languages") or [])

        preferences = None
        if prefs is not None:
            preferences = CandidatePreferences(
                work_locations=list(prefs.work_locations or []),
                preferred_locations=list(prefs.preferred_locations or []),
                open_to_relocation=prefs.open_to_relocation,
                salary_min=prefs.salary_expectation_min,
                salary_max=prefs.salary_expectation_max,
            )

        return CandidateSnapshot(
            user_id=user_id,
            skills=[CandidateSkill(name=skill.skill_name, proficiency=skill.proficiency) for skill in skills],
            models=[model.model_name for model in models],
            frameworks=frameworks,
            languages=languages,
            years_experience=profile.years_experience if profile else None,
            preferences=preferences,
        )
