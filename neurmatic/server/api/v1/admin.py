"""
Admin endpoints.
"""

from fastapi import APIRouter, Depends, Query

from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.models.io.analytics import AnalyticsOverview
from neurmatic.server.services.analytics import build_overview
from neurmatic.server.services.deps import ReposDep, require_roles

router = APIRouter(tags=["admin"])


@router.get(
    "/analytics/overview",
    response_model=AnalyticsOverview,
    summary="Platform Overview",
    description="Platform-wide counts for the admin dashboard. Admin only.",
    responses={403: {"description": "Caller is not an admin"}},
)
async def analytics_overview(
    repos: ReposDep,
    days: int = Query(30, ge=1, le=365, description="Window for new-user counts"),
    user: User = Depends(require_roles(UserRole.ADMIN)),
) -> AnalyticsOverview:
    """
    Platform overview.

    - **days**: Members who registered within this many days count as new.

    The application conversion rate is the share of applications that reached
    `offered` or `accepted`.
    """
    return await build_overview(repos, days)
