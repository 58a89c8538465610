"""
Request Dependencies.

Provides the database session, the repository bundle, the authenticated user
and the scoring services to API endpoints.
"""

from dataclasses import dataclass
from typing import Annotated, Callable, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from neurmatic.core.cache import get_cache
from neurmatic.core.database import get_session
from neurmatic.core.database.entities.users import User, UserStatus
from neurmatic.core.database.repositories.bundle import SqlRepoBundle, build_sql_repos_from_session
from neurmatic.core.errors import ForbiddenError, UnauthorizedError
from neurmatic.core.models.io.common import page_offset
from neurmatic.core.security import ACCESS_SCOPE, decode_token
from neurmatic.matching.service import MatchingService
from neurmatic.recommendations.service import RecommendationService
from neurmatic.server.core.config import settings
from neurmatic.server.core.constant import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from .applications import ApplicationService
from .auth import AuthService
from .companies import CompanyService
from .content import ArticleService, ForumService
from .jobs import JobService
from .profiles import ProfileService
from .social import FollowService, NotificationService

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_repos(session: SessionDep) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


async def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials], repos: SqlRepoBundle
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("scope") != ACCESS_SCOPE or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    user = await repos.users.get_by_id(payload["sub"])
    if user is None or user.status != UserStatus.ACTIVE:
        raise UnauthorizedError("User not found or inactive")
    return user


async def get_current_user(
    repos: ReposDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Resolve the bearer access token to an active user, or fail with 401."""
    return await _user_from_credentials(credentials, repos)


async def get_optional_user(
    repos: ReposDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """Like :func:`get_current_user` but anonymous requests resolve to None."""
    if credentials is None:
        return None
    return await _user_from_credentials(credentials, repos)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]


def require_roles(*roles: str) -> Callable:
    """Dependency factory: the current user must hold one of ``roles`` (403 otherwise)."""

    async def _require(user: CurrentUserDep) -> User:
        if user.role not in roles:
            raise ForbiddenError("Not enough permissions")
        return user

    return _require


def get_matching_service(repos: ReposDep) -> MatchingService:
    return MatchingService(repos, get_cache(), settings.cache.match_ttl_seconds)


def get_recommendation_service(repos: ReposDep) -> RecommendationService:
    return RecommendationService(repos, get_cache(), settings.cache.recommendation_ttl_seconds)


MatchingDep = Annotated[MatchingService, Depends(get_matching_service)]
RecommendationDep = Annotated[RecommendationService, Depends(get_recommendation_service)]


# ---------------------------------------------------------------------------
# Request-scoped business services
# ---------------------------------------------------------------------------


def get_auth_service(repos: ReposDep) -> AuthService:
    return AuthService(repos)


def get_profile_service(repos: ReposDep, matching: MatchingDep) -> ProfileService:
    return ProfileService(repos, matching)


def get_company_service(repos: ReposDep) -> CompanyService:
    return CompanyService(repos)


def get_job_service(repos: ReposDep, matching: MatchingDep) -> JobService:
    return JobService(repos, matching)


JobServiceDep = Annotated[JobService, Depends(get_job_service)]


def get_application_service(repos: ReposDep, jobs: JobServiceDep) -> ApplicationService:
    return ApplicationService(repos, jobs)


def get_article_service(repos: ReposDep) -> ArticleService:
    return ArticleService(repos)


def get_forum_service(repos: ReposDep) -> ForumService:
    return ForumService(repos)


def get_follow_service(repos: ReposDep) -> FollowService:
    return FollowService(repos)


def get_notification_service(repos: ReposDep) -> NotificationService:
    return NotificationService(repos)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
CompanyServiceDep = Annotated[CompanyService, Depends(get_company_service)]
ApplicationServiceDep = Annotated[ApplicationService, Depends(get_application_service)]
ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
ForumServiceDep = Annotated[ForumService, Depends(get_forum_service)]
FollowServiceDep = Annotated[FollowService, Depends(get_follow_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return page_offset(self.page, self.limit)


def get_pagination(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> Pagination:
    return Pagination(page=page, limit=limit)


PaginationDep = Annotated[Pagination, Depends(get_pagination)]
