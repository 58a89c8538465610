"""Admin analytics overview."""

from datetime import timedelta

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.jobs import ApplicationStatus
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.models.io.analytics import AnalyticsOverview

CONVERTED_STATUSES = (ApplicationStatus.OFFERED, ApplicationStatus.ACCEPTED)


def conversion_rate(applications_by_status: dict[str, int]) -> float:
    """Share of applications that reached an offer, 0.0 when there are none."""
    total = sum(applications_by_status.values())
    if total == 0:
        return 0.0
    converted = sum(applications_by_status.get(status, 0) for status in CONVERTED_STATUSES)
    return round(converted / total, 4)


async def build_overview(repos: SqlRepoBundle, days: int) -> AnalyticsOverview:
    analytics = repos.analytics
    by_status = await analytics.count_applications_by_status()
    return AnalyticsOverview(
        days=days,
        total_users=await analytics.count_users(),
        users_by_role=await analytics.count_users_by_role(),
        new_users=await analytics.count_users_since(utc_now() - timedelta(days=days)),
        active_jobs=await analytics.count_active_jobs(),
        applications_by_status=by_status,
        total_applications=sum(by_status.values()),
        published_articles=await analytics.count_published_articles(),
        open_topics=await analytics.count_open_topics(),
        application_conversion_rate=conversion_rate(by_status),
    )
