"""
Company repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.companies import Company
from .base import SQLModelRepository


class CompanyRepository(SQLModelRepository[Company]):
    """Repository for employers."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Company)

    async def get_by_slug(self, slug: str) -> Optional[Company]:
        stmt = select(Company).where(Company.slug == slug)
        return await self._first(stmt)

    async def slug_exists(self, slug: str) -> bool:
        return await self.get_by_slug(slug) is not None

    async def list_page(
        self, limit: int, offset: int, verified: Optional[bool] = None
    ) -> Tuple[List[Company], int]:
        stmt = select(Company).order_by(Company.name)
        if verified is not None:
            stmt = stmt.where(Company.verified == verified)
        return await self._page(stmt, limit, offset)
