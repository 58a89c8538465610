"""
Job board endpoints: postings, matching, applications to a job and saving jobs.

``/close-expired`` is declared before ``/{job_id}`` so the literal path wins.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.database.repositories.jobs import JobSearchFilters
from neurmatic.core.models.io.common import ExperienceLevel, JobStatusLiteral, JobType, Page, WorkLocation
from neurmatic.core.models.io.jobs import (
    ApplicationCreate,
    ApplicationRead,
    CloseExpiredResult,
    JobCreate,
    JobRead,
    JobSort,
    JobUpdate,
    MatchScoreRead,
    SavedJobRead,
)
from neurmatic.server.services.deps import (
    ApplicationServiceDep,
    CurrentUserDep,
    JobServiceDep,
    OptionalUserDep,
    PaginationDep,
    require_roles,
)

router = APIRouter(tags=["jobs"])


@router.post(
    "",
    response_model=JobRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post Job",
    description="Create a job for a verified company the caller manages.",
    response_description="The created job with its skill requirements.",
    responses={
        403: {"description": "Caller does not manage the company, or the company is not verified"},
        404: {"description": "Company not found"},
        422: {"description": "Invalid job data, e.g. salary_max below salary_min"},
    },
)
async def create_job(data: JobCreate, user: CurrentUserDep, service: JobServiceDep) -> JobRead:
    """
    Post a job.

    - **company_id**: Company the job belongs to; must be verified.
    - **skills**: Skill requirements with a 1..5 level and a required flag.
    - **primary_llms**, **frameworks**, **programming_languages**: Tech stack used for matching.
    - **status**: `draft` by default; `active` publishes the job immediately.
    - **expires_at**: When the posting stops accepting applications.
    """
    return await service.create(user, data)


@router.get(
    "",
    response_model=Page[JobRead],
    summary="Search Jobs",
    description="Filter, sort and paginate jobs. With `match=true` each job carries the caller's match score.",
    response_description="One page of jobs.",
)
async def list_jobs(
    pagination: PaginationDep,
    service: JobServiceDep,
    user: OptionalUserDep,
    status_filter: Optional[JobStatusLiteral] = Query("active", alias="status"),
    job_type: Optional[JobType] = None,
    work_location: Optional[WorkLocation] = None,
    experience_level: Optional[ExperienceLevel] = None,
    location: Optional[str] = Query(None, max_length=200),
    salary_min: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None, max_length=200),
    company_id: Optional[str] = None,
    sort_by: JobSort = "published_at",
    match: bool = False,
    min_match_score: Optional[int] = Query(None, ge=0, le=100),
) -> Page[JobRead]:
    """
    Search jobs.

    - **status**: Job status, `active` by default.
    - **location**: Case-insensitive substring of the job location.
    - **salary_min**: Jobs whose salary band reaches at least this amount.
    - **search**: Substring of the title or description.
    - **sort_by**: `published_at`, `salary_max` or `view_count` (descending).
    - **match**: Attach the authenticated caller's match score to each job.
    - **min_match_score**: Keep only jobs the caller scores at least this on.
    """
    filters = JobSearchFilters(
        status=status_filter,
        job_type=job_type,
        work_location=work_location,
        experience_level=experience_level,
        location=location,
        salary_min=salary_min,
        search=search,
        company_id=company_id,
        sort_by=sort_by,
    )
    items, total = await service.search(
        filters,
        pagination.limit,
        pagination.offset,
        user=user,
        with_match=match,
        min_match_score=min_match_score,
    )
    return Page[JobRead](items=items, total=total, page=pagination.page, limit=pagination.limit)


@router.post(
    "/close-expired",
    response_model=CloseExpiredResult,
    summary="Close Expired Jobs",
    description="Close every active job whose expiry date has passed. Admin only.",
    response_description="Number of closed jobs.",
)
async def close_expired_jobs(
    service: JobServiceDep,
    user: User = Depends(require_roles(UserRole.ADMIN)),
) -> CloseExpiredResult:
    return CloseExpiredResult(closed=await service.close_expired())


@router.get(
    "/{job_id}",
    response_model=JobRead,
    summary="Get Job",
    description="Get a job and count the view.",
    responses={404: {"description": "Job not found or deleted"}},
)
async def get_job(job_id: str, service: JobServiceDep) -> JobRead:
    return await service.get(job_id)


@router.get(
    "/{job_id}/match",
    response_model=MatchScoreRead,
    summary="Get My Match Score",
    description="How well the caller matches the job, with a per-factor breakdown and the top reasons.",
    response_description="Match score (0..100), breakdown and explanation.",
    responses={404: {"description": "Job not found"}},
)
async def get_job_match(job_id: str, user: CurrentUserDep, service: JobServiceDep) -> MatchScoreRead:
    match = await service.match(job_id, user)
    return MatchScoreRead(score=match.score, breakdown=match.breakdown, explanation=match.explanation)


@router.put(
    "/{job_id}",
    response_model=JobRead,
    summary="Update Job",
    description="Update a job. `skills`, when sent, replaces all skill requirements.",
    responses={403: {"description": "Not the company owner"}, 404: {"description": "Job not found"}},
)
async def update_job(job_id: str, data: JobUpdate, user: CurrentUserDep, service: JobServiceDep) -> JobRead:
    return await service.update(user, job_id, data)


@router.delete(
    "/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Job",
    description="Soft-delete and close a job.",
    responses={403: {"description": "Not the company owner"}, 404: {"description": "Job not found"}},
)
async def delete_job(job_id: str, user: CurrentUserDep, service: JobServiceDep) -> Response:
    await service.delete(user, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{job_id}/apply",
    response_model=ApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to Job",
    description="Apply to an active, unexpired job. The company owner is notified.",
    response_description="The created application.",
    responses={
        400: {"description": "Job is not active or has expired"},
        404: {"description": "Job not found"},
        409: {"description": "Already applied"},
    },
)
async def apply_to_job(
    job_id: str, data: ApplicationCreate, user: CurrentUserDep, service: ApplicationServiceDep
) -> ApplicationRead:
    """
    Apply to a job.

    - **cover_letter**: Optional cover letter (max 5000 characters).
    - **resume_url**: Optional link to a resume.
    """
    return ApplicationRead.model_validate(await service.apply(user, job_id, data))


@router.get(
    "/{job_id}/applications",
    response_model=list[ApplicationRead],
    summary="List Job Applications",
    description="Applications received for a job. Company owner or admin only.",
    responses={403: {"description": "Not the company owner"}, 404: {"description": "Job not found"}},
)
async def list_job_applications(
    job_id: str,
    user: CurrentUserDep,
    service: ApplicationServiceDep,
    status_filter: Optional[str] = Query(None, alias="status"),
) -> list[ApplicationRead]:
    applications = await service.list_for_job(user, job_id, status_filter)
    return [ApplicationRead.model_validate(application) for application in applications]


@router.post(
    "/{job_id}/save",
    response_model=SavedJobRead,
    status_code=status.HTTP_201_CREATED,
    summary="Save Job",
    description="Bookmark a job. Saving it again returns the existing bookmark.",
    responses={404: {"description": "Job not found"}},
)
async def save_job(job_id: str, user: CurrentUserDep, service: JobServiceDep) -> SavedJobRead:
    return SavedJobRead.model_validate(await service.save(user, job_id))


@router.delete(
    "/{job_id}/save",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unsave Job",
    responses={404: {"description": "Job is not saved"}},
)
async def unsave_job(job_id: str, user: CurrentUserDep, service: JobServiceDep) -> Response:
    await service.unsave(user, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
