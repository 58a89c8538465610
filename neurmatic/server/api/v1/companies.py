"""
Company endpoints.
"""

from fastapi import APIRouter, Depends, status

from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.models.io.common import Page
from neurmatic.core.models.io.companies import CompanyCreate, CompanyRead, CompanyUpdate
from neurmatic.server.services.deps import CompanyServiceDep, CurrentUserDep, PaginationDep, require_roles

router = APIRouter(tags=["companies"])


@router.post(
    "",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company",
    description="Create a company owned by the caller. The slug is derived from the name.",
    response_description="The created company.",
    responses={403: {"description": "Caller is not a company account or admin"}},
)
async def create_company(
    data: CompanyCreate,
    service: CompanyServiceDep,
    user: User = Depends(require_roles(UserRole.COMPANY, UserRole.ADMIN)),
) -> CompanyRead:
    """
    Create a company.

    - **name**: Company name; the URL slug is derived from it and made unique.
    - **benefits**: Benefits offered, used for the cultural fit part of job matching.
    """
    company = await service.create(user, data)
    return CompanyRead.model_validate(company)


@router.get("", response_model=Page[CompanyRead], summary="List Companies")
async def list_companies(pagination: PaginationDep, service: CompanyServiceDep) -> Page[CompanyRead]:
    items, total = await service.list(pagination.limit, pagination.offset)
    return Page[CompanyRead](
        items=[CompanyRead.model_validate(company) for company in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get(
    "/{slug}",
    response_model=CompanyRead,
    summary="Get Company",
    responses={404: {"description": "Company not found"}},
)
async def get_company(slug: str, service: CompanyServiceDep) -> CompanyRead:
    return CompanyRead.model_validate(await service.get_by_slug(slug))


@router.put(
    "/{company_id}",
    response_model=CompanyRead,
    summary="Update Company",
    description="Update a company. Only its owner or an admin may do so.",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Company not found"}},
)
async def update_company(
    company_id: str, data: CompanyUpdate, user: CurrentUserDep, service: CompanyServiceDep
) -> CompanyRead:
    company = await service.update(user, company_id, data)
    return CompanyRead.model_validate(company)


@router.post(
    "/{company_id}/verify",
    response_model=CompanyRead,
    summary="Verify Company",
    description="Mark a company as verified so it can post jobs. Admin only.",
    responses={403: {"description": "Caller is not an admin"}, 404: {"description": "Company not found"}},
)
async def verify_company(
    company_id: str,
    service: CompanyServiceDep,
    user: User = Depends(require_roles(UserRole.ADMIN)),
) -> CompanyRead:
    return CompanyRead.model_validate(await service.verify(company_id))
