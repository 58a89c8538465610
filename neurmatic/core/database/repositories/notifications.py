"""
Notification repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy import select as sa_select
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.notifications import Notification
from .base import SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    """Repository for in-app notifications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def notify(
        self, user_id: str, type: str, title: str, message: str, action_url: Optional[str] = None
    ) -> Notification:
        return await self.create(
            Notification(user_id=user_id, type=type, title=title, message=message, action_url=action_url)
        )

    async def list_for_user(
        self, user_id: str, limit: int, offset: int, unread_only: bool = False
    ) -> Tuple[List[Notification], int]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read_at.is_(None))  # type: ignore[union-attr]
        stmt = stmt.order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
        return await self._page(stmt, limit, offset)

    async def count_unread(self, user_id: str) -> int:
        stmt = (
            sa_select(func.count(Notification.id))
            .where(Notification.user_id == user_id)
            .where(Notification.read_at.is_(None))  # type: ignore[union-attr]
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of the user as read and return how many changed."""
        result = await self.session.execute(
            sa_update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read_at.is_(None))  # type: ignore[union-attr]
            .values(read_at=utc_now())
        )
        await self.session.commit()
        return int(result.rowcount or 0)
