"""
Follow graph repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.follows import Follow
from .base import SQLModelRepository


class FollowRepository(SQLModelRepository[Follow]):
    """Repository for follow relationships."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Follow)

    async def get_pair(self, follower_id: str, following_id: str) -> Optional[Follow]:
        stmt = select(Follow).where((Follow.follower_id == follower_id) & (Follow.following_id == following_id))
        return await self._first(stmt)

    async def list_followers(self, user_id: str) -> List[Follow]:
        stmt = select(Follow).where(Follow.following_id == user_id).order_by(Follow.created_at.desc())  # type: ignore[attr-defined]
        return await self._all(stmt)

    async def list_following(self, user_id: str) -> List[Follow]:
        stmt = select(Follow).where(Follow.follower_id == user_id).order_by(Follow.created_at.desc())  # type: ignore[attr-defined]
        return await self._all(stmt)
