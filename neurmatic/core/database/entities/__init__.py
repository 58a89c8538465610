"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- users: Accounts, profiles, skills, LLM models, work history, job preferences, profile views
- companies: Employers
- jobs: Job postings, job skills, applications, saved jobs
- articles: News articles and bookmarks
- forum: Topics, votes and replies
- follows: Member follow graph
- notifications: In-app notifications
- recommendations: Feedback on recommended items
"""

from . import (
    articles,
    companies,
    follows,
    forum,
    jobs,
    notifications,
    recommendations,
    users,
)

__all__ = [
    "articles",
    "companies",
    "follows",
    "forum",
    "jobs",
    "notifications",
    "recommendations",
    "users",
]
