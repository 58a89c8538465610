"""
Repository layer.

One repository per aggregate, all built on ``SQLModelRepository``. Use
``build_sql_repos_from_session`` to get every repository bound to one session.
"""

from .base import AsyncBaseRepository, QueryBuilder, SQLModelRepository
from .bundle import SqlRepoBundle, build_sql_repos_from_session

__all__ = [
    "AsyncBaseRepository",
    "QueryBuilder",
    "SQLModelRepository",
    "SqlRepoBundle",
    "build_sql_repos_from_session",
]
