"""
Saved jobs listing.
"""

from fastapi import APIRouter

from neurmatic.core.models.io.jobs import SavedJobRead
from neurmatic.server.services.deps import CurrentUserDep, JobServiceDep

router = APIRouter(tags=["saved-jobs"])


@router.get(
    "",
    response_model=list[SavedJobRead],
    summary="List Saved Jobs",
    description="Jobs the caller saved, newest first.",
)
async def list_saved_jobs(user: CurrentUserDep, service: JobServiceDep) -> list[SavedJobRead]:
    return [SavedJobRead.model_validate(saved) for saved in await service.list_saved(user)]
