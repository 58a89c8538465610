"""
Tests for the cached match score service.
"""

from datetime import datetime
from unittest.mock import patch

import pytest
import pytest_asyncio

from neurmatic.core.cache import CacheStore
from neurmatic.core.database.entities.users import JobPreferences, Profile, UserModel, UserSkill, WorkExperience
from neurmatic.core.errors import NotFoundError
from neurmatic.matching.scoring import calculate_match
from neurmatic.matching.service import MatchingService, match_cache_key

pytestmark = pytest.mark.asyncio


@pytest.fixture
def cache() -> CacheStore:
    return CacheStore()


@pytest.fixture
def service(repos, cache) -> MatchingService:
    return MatchingService(repos, cache, ttl_seconds=60)


@pytest_asyncio.fixture
async def company(make_user, make_company):
    owner = await make_user("acme", role="company")
    return await make_company(owner, benefits=["Remote stipend"])


@pytest_asyncio.fixture
async def candidate(repos, make_user):
    user = await make_user("alice")
    await repos.skills.create(UserSkill(user_id=user.id, skill_name="Python", proficiency=5))
    await repos.models.create(UserModel(user_id=user.id, model_name="gpt-4"))
    await repos.experiences.create(
        WorkExperience(
            user_id=user.id,
            company_name="Prev",
            title="Engineer",
            tech_stack={"frameworks": ["LangChain"], "languages": ["Python"]},
        )
    )
    await repos.profiles.create(Profile(user_id=user.id, years_experience=4))
    await repos.preferences.create(
        JobPreferences(user_id=user.id, work_locations=["remote"], salary_expectation_min=100, salary_expectation_max=150)
    )
    return user


class TestCalculateMatchScore:
    async def test_unknown_job(self, service, candidate):
        with pytest.raises(NotFoundError):
            await service.calculate_match_score("missing", candidate.id)

    async def test_unknown_user(self, service, company, make_job):
        job = await make_job(company)
        with pytest.raises(NotFoundError):
            await service.calculate_match_score(job.id, "missing")

    async def test_snapshots_feed_the_scorer(self, service, company, make_job, candidate):
        job = await make_job(
            company,
            skills=[("Python", 4, True)],
            primary_llms=["GPT-4"],
            frameworks=["langchain"],
            programming_languages=["python"],
            salary_min=120,
            salary_max=160,
        )

        snapshot_job = await service._load_job(job.id)
        snapshot_candidate = await service._load_candidate(candidate.id)

        assert snapshot_job.company_benefits == ["Remote stipend"]
        assert [s.name for s in snapshot_job.skills] == ["Python"]
        assert snapshot_candidate.frameworks == ["LangChain"]
        assert snapshot_candidate.languages == ["Python"]
        assert snapshot_candidate.years_experience == 4
        assert snapshot_candidate.preferences.work_locations == ["remote"]

        match = await service.calculate_match_score(job.id, candidate.id)

        assert match == calculate_match(snapshot_job, snapshot_candidate)
        assert 0 <= match.score <= 100

    async def test_tech_stack_comes_from_latest_experience(self, service, repos, company, make_job, make_user):
        user = await make_user("bob")
        await repos.models.create(UserModel(user_id=user.id, model_name="gpt-4"))
        for started, framework in ((datetime(2015, 1, 1), "Django"), (datetime(2023, 1, 1), "LangChain")):
            await repos.experiences.create(
                WorkExperience(
                    user_id=user.id,
                    company_name=f"{framework} shop",
                    title="Engineer",
                    start_date=started,
                    tech_stack={"frameworks": [framework], "languages": ["Python"]},
                )
            )
        job = await make_job(company, primary_llms=["gpt-4"], frameworks=["LangChain"], programming_languages=["Python"])

        snapshot = await service._load_candidate(user.id)
        match = await service.calculate_match_score(job.id, user.id)

        assert snapshot.frameworks == ["LangChain"]
        assert match.breakdown["tech_stack"] == 100

    async def test_result_is_cached(self, service, cache, company, make_job, candidate):
        job = await make_job(company, skills=[("Python", 3, True)])

        with patch("neurmatic.matching.service.log_match_computed") as mock_log:
            first = await service.calculate_match_score(job.id, candidate.id)
            assert await cache.has(match_cache_key(candidate.id, job.id))

            with patch.object(service, "_load_job", side_effect=AssertionError("should not reload")):
                second = await service.calculate_match_score(job.id, candidate.id)

        assert second.score == first.score
        assert [c.kwargs["cached"] for c in mock_log.call_args_list] == [False, True]

    async def test_scores_for_several_jobs_skip_failures(self, service, company, make_job, candidate):
        job = await make_job(company)

        scores = await service.get_match_scores_for_jobs([job.id, "missing"], candidate.id)

        assert list(scores) == [job.id]


class TestInvalidation:
    async def test_user_and_job_patterns(self, service, cache):
        await cache.set(match_cache_key("u1", "j1"), {})
        await cache.set(match_cache_key("u1", "j2"), {})
        await cache.set(match_cache_key("u2", "j1"), {})

        assert await service.invalidate_user_matches("u1") == 2
        assert await service.invalidate_job_matches("j1") == 1
        assert cache.size() == 0

    async def test_single_pair(self, service, cache):
        await cache.set(match_cache_key("u1", "j1"), {})
        await service.invalidate_match_score("j1", "u1")
        assert not await cache.has(match_cache_key("u1", "j1"))
