"""
Company service.
"""

from typing import List, Tuple

from neurmatic.core.database.entities.companies import Company
from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import ForbiddenError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.companies import CompanyCreate, CompanyUpdate

from .slugs import unique_slug

logger = get_logger(__name__)


def ensure_company_manager(company: Company, user: User) -> None:
    """Only the company owner or an admin may manage a company and its jobs."""
    if company.owner_id != user.id and user.role != UserRole.ADMIN:
        raise ForbiddenError("You do not manage this company")


class CompanyService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def create(self, user: User, data: CompanyCreate) -> Company:
        slug = await unique_slug(data.name, self.repos.companies.slug_exists)
        company = await self.repos.companies.create(Company(**data.model_dump(), slug=slug, owner_id=user.id))
        logger.info(f"Company created: id={company.id}, slug={company.slug}, owner={user.id}")
        return company

    async def get_by_slug(self, slug: str) -> Company:
        company = await self.repos.companies.get_by_slug(slug)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    async def get(self, company_id: str) -> Company:
        company = await self.repos.companies.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    async def list(self, limit: int, offset: int) -> Tuple[List[Company], int]:
        return await self.repos.companies.list_page(limit, offset)

    async def update(self, user: User, company_id: str, data: CompanyUpdate) -> Company:
        company = await self.get(company_id)
        ensure_company_manager(company, user)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(company, field, value)
        return await self.repos.companies.update(company)

    async def verify(self, company_id: str) -> Company:
        company = await self.get(company_id)
        company.verified = True
        company = await self.repos.companies.update(company)
        logger.info(f"Company verified: id={company.id}")
        return company
