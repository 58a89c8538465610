"""
Job application service.

Applications move through a fixed pipeline. Company managers advance them
with :meth:`ApplicationService.change_status`; applicants may withdraw until
an offer is made.
"""

from typing import Dict, FrozenSet, List, Optional

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.jobs import ApplicationStatus, JobApplication, JobStatus
from neurmatic.core.database.entities.notifications import NotificationType
from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.jobs import ApplicationCreate

from .jobs import JobService

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.REVIEWED, ApplicationStatus.REJECTED}),
    ApplicationStatus.REVIEWED: frozenset({ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.SHORTLISTED: frozenset({ApplicationStatus.INTERVIEWED, ApplicationStatus.REJECTED}),
    ApplicationStatus.INTERVIEWED: frozenset({ApplicationStatus.OFFERED, ApplicationStatus.REJECTED}),
    ApplicationStatus.OFFERED: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
}

STATUS_MESSAGES: Dict[str, str] = {
    ApplicationStatus.REVIEWED: "Your application for {title} has been reviewed.",
    ApplicationStatus.SHORTLISTED: "Good news! You have been shortlisted for {title}.",
    ApplicationStatus.INTERVIEWED: "Your interview for {title} has been recorded.",
    ApplicationStatus.OFFERED: "Congratulations! You have received an offer for {title}.",
    ApplicationStatus.ACCEPTED: "Your acceptance of the offer for {title} is confirmed.",
    ApplicationStatus.REJECTED: "Your application for {title} was not selected this time.",
}

NON_WITHDRAWABLE = frozenset({ApplicationStatus.OFFERED, ApplicationStatus.ACCEPTED})


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class ApplicationService:
    def __init__(self, repos: SqlRepoBundle, jobs: JobService) -> None:
        self.repos = repos
        self.jobs = jobs

    async def _get(self, application_id: str) -> JobApplication:
        application = await self.repos.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    async def apply(self, user: User, job_id: str, data: ApplicationCreate) -> JobApplication:
        job = await self.jobs.get_visible(job_id)
        if job.status != JobStatus.ACTIVE:
            raise BadRequestError("Job is not accepting applications")
        if job.expires_at is not None and job.expires_at < utc_now():
            raise BadRequestError("Job posting has expired")
        if await self.repos.applications.get_for_job_and_user(job_id, user.id):
            raise ConflictError("You have already applied to this job")

        application = await self.repos.applications.create(
            JobApplication(job_id=job_id, user_id=user.id, cover_letter=data.cover_letter, resume_url=data.resume_url)
        )
        await self.repos.jobs.increment_application_count(job_id)

        company = await self.repos.companies.get_by_id(job.company_id)
        if company is not None:
            await self.repos.notifications.notify(
                company.owner_id,
                NotificationType.APPLICATION_RECEIVED,
                "New application",
                f"{user.username} applied to {job.title}.",
                action_url=f"/jobs/{job.id}/applications",
            )
        logger.info(f"Application created: id={application.id}, job={job_id}, user={user.id}")
        return application

    async def list_mine(self, user: User, status: Optional[str] = None) -> List[JobApplication]:
        return await self.repos.applications.list_for_user(user.id, status)

    async def get(self, user: User, application_id: str) -> JobApplication:
        application = await self._get(application_id)
        if application.user_id == user.id or user.role == UserRole.ADMIN:
            return application

        job = await self.repos.jobs.get_by_id(application.job_id)
        company = await self.repos.companies.get_by_id(job.company_id) if job else None
        if company is None or company.owner_id != user.id:
            raise ForbiddenError("You cannot view this application")
        return application

    async def withdraw(self, user: User, application_id: str) -> JobApplication:
        application = await self._get(application_id)
        if application.user_id != user.id:
            raise ForbiddenError("Only the applicant can withdraw an application")
        if application.status == ApplicationStatus.WITHDRAWN:
            raise BadRequestError("Application is already withdrawn")
        if application.status in NON_WITHDRAWABLE:
            raise BadRequestError(f"Cannot withdraw an application that is {application.status}")

        application.status = ApplicationStatus.WITHDRAWN
        return await self.repos.applications.update(application)

    async def change_status(self, user: User, application_id: str, status: str) -> JobApplication:
        """Advance an application. Only transitions in ``ALLOWED_TRANSITIONS`` are accepted."""
        application = await self._get(application_id)
        job = await self.repos.jobs.get_by_id(application.job_id)
        if job is None:
            raise NotFoundError("Job not found")
        await self.jobs.ensure_job_manager(job, user)

        if not can_transition(application.status, status):
            raise BadRequestError(f"Cannot change application status from {application.status} to {status}")

        if application.status == ApplicationStatus.PENDING:
            application.reviewed_at = utc_now()
        application.status = status
        application = await self.repos.applications.update(application)

        await self.repos.notifications.notify(
            application.user_id,
            NotificationType.APPLICATION_STATUS,
            "Application update",
            STATUS_MESSAGES[status].format(title=job.title),
            action_url=f"/applications/{application.id}",
        )
        logger.info(f"Application {application.id} moved to {status} by {user.id}")
        return application

    async def list_for_job(self, user: User, job_id: str, status: Optional[str] = None) -> List[JobApplication]:
        job = await self.jobs.get_visible(job_id)
        await self.jobs.ensure_job_manager(job, user)
        return await self.repos.applications.list_for_job(job_id, status)
