"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: Pagination envelope and shared literals
- auth: Registration, login and token models
- profiles: Profiles, skills, work history, LLM models, job preferences
- companies: Company models
- jobs: Jobs, match scores, applications, saved jobs
- articles: News articles and bookmarks
- forum: Topics and votes
- social: Follows and notifications
- recommendations: Recommendations and feedback
- analytics: Admin analytics overview
"""

from .common import Page

__all__ = ["Page"]
