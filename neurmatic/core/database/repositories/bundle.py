"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
for easy dependency injection in services and application components.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .analytics import AnalyticsRepository
from .articles import ArticleRepository, BookmarkRepository
from .companies import CompanyRepository
from .follows import FollowRepository
from .forum import ReplyRepository, TopicRepository, TopicVoteRepository
from .jobs import (
    JobApplicationRepository,
    JobRepository,
    JobSkillRepository,
    SavedJobRepository,
)
from .notifications import NotificationRepository
from .recommendations import RecommendationDataRepository, RecommendationFeedbackRepository
from .users import (
    JobPreferencesRepository,
    ProfileRepository,
    ProfileViewRepository,
    UserModelRepository,
    UserRepository,
    UserSkillRepository,
    WorkExperienceRepository,
)


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories sharing one session."""

    users: UserRepository
    profiles: ProfileRepository
    skills: UserSkillRepository
    models: UserModelRepository
    experiences: WorkExperienceRepository
    preferences: JobPreferencesRepository
    profile_views: ProfileViewRepository
    companies: CompanyRepository
    jobs: JobRepository
    job_skills: JobSkillRepository
    applications: JobApplicationRepository
    saved_jobs: SavedJobRepository
    articles: ArticleRepository
    bookmarks: BookmarkRepository
    topics: TopicRepository
    topic_votes: TopicVoteRepository
    replies: ReplyRepository
    follows: FollowRepository
    notifications: NotificationRepository
    feedback: RecommendationFeedbackRepository
    recommendation_data: RecommendationDataRepository
    analytics: AnalyticsRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        users=UserRepository(session),
        profiles=ProfileRepository(session),
        skills=UserSkillRepository(session),
        models=UserModelRepository(session),
        experiences=WorkExperienceRepository(session),
        preferences=JobPreferencesRepository(session),
        profile_views=ProfileViewRepository(session),
        companies=CompanyRepository(session),
        jobs=JobRepository(session),
        job_skills=JobSkillRepository(session),
        applications=JobApplicationRepository(session),
        saved_jobs=SavedJobRepository(session),
        articles=ArticleRepository(session),
        bookmarks=BookmarkRepository(session),
        topics=TopicRepository(session),
        topic_votes=TopicVoteRepository(session),
        replies=ReplyRepository(session),
        follows=FollowRepository(session),
        notifications=NotificationRepository(session),
        feedback=RecommendationFeedbackRepository(session),
        recommendation_data=RecommendationDataRepository(session),
        analytics=AnalyticsRepository(session),
    )
