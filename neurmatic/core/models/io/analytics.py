"""
Schema models for the admin analytics overview.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel


class AnalyticsOverview(BaseModel):
    days: int
    total_users: int
    users_by_role: Dict[str, int]
    new_users: int
    active_jobs: int
    applications_by_status: Dict[str, int]
    total_applications: int
    published_articles: int
    open_topics: int
    application_conversion_rate: float
