"""
Job application endpoints for applicants and company managers.
"""

from typing import Optional

from fastapi import APIRouter, Query

from neurmatic.core.models.io.common import ApplicationStatusLiteral
from neurmatic.core.models.io.jobs import ApplicationRead, ApplicationStatusUpdate
from neurmatic.server.services.deps import ApplicationServiceDep, CurrentUserDep

router = APIRouter(tags=["applications"])


@router.get(
    "/me",
    response_model=list[ApplicationRead],
    summary="My Applications",
    description="The caller's applications, newest first, optionally filtered by status.",
)
async def list_my_applications(
    user: CurrentUserDep,
    service: ApplicationServiceDep,
    status_filter: Optional[ApplicationStatusLiteral] = Query(None, alias="status"),
) -> list[ApplicationRead]:
    return [ApplicationRead.model_validate(app) for app in await service.list_mine(user, status_filter)]


@router.get(
    "/{application_id}",
    response_model=ApplicationRead,
    summary="Get Application",
    description="Visible to the applicant, the company owner and admins.",
    responses={403: {"description": "Not allowed to view"}, 404: {"description": "Application not found"}},
)
async def get_application(application_id: str, user: CurrentUserDep, service: ApplicationServiceDep) -> ApplicationRead:
    return ApplicationRead.model_validate(await service.get(user, application_id))


@router.post(
    "/{application_id}/withdraw",
    response_model=ApplicationRead,
    summary="Withdraw Application",
    description="Withdraw the caller's application. Not possible once an offer was made.",
    responses={
        400: {"description": "Already withdrawn, or offered/accepted"},
        403: {"description": "Not the applicant"},
        404: {"description": "Application not found"},
    },
)
async def withdraw_application(
    application_id: str, user: CurrentUserDep, service: ApplicationServiceDep
) -> ApplicationRead:
    return ApplicationRead.model_validate(await service.withdraw(user, application_id))


@router.put(
    "/{application_id}/status",
    response_model=ApplicationRead,
    summary="Change Application Status",
    description="Advance an application through the hiring pipeline. The applicant is notified.",
    responses={
        400: {"description": "Transition not allowed"},
        403: {"description": "Not the company owner"},
        404: {"description": "Application not found"},
    },
)
async def change_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    user: CurrentUserDep,
    service: ApplicationServiceDep,
) -> ApplicationRead:
    """
    Change an application's status.

    Allowed moves: `pending` to `reviewed`; `reviewed` to `shortlisted`;
    `shortlisted` to `interviewed`; `interviewed` to `offered`; `offered` to
    `accepted`. Any of these stages may also move to `rejected`.

    - **status**: Target status.
    """
    return ApplicationRead.model_validate(await service.change_status(user, application_id, data.status))
