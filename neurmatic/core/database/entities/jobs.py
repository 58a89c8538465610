"""
Job board entity models.

This module contains job postings, their skill requirements, applications
and saved jobs. Jobs and their skills are the employer side of job matching.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class JobStatus:
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class ApplicationStatus:
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    INTERVIEWED = "interviewed"
    OFFERED = "offered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobBase(Base):
    """Base fields for job entity."""

    title: str = Field(max_length=200)
    description: str
    requirements: Optional[str] = Field(default=None)
    job_type: str = Field(max_length=20, index=True)
    work_location: str = Field(max_length=20, index=True)
    experience_level: str = Field(max_length=20, index=True)
    location: Optional[str] = Field(default=None, max_length=200)
    salary_min: Optional[int] = Field(default=None)
    salary_max: Optional[int] = Field(default=None)
    salary_currency: str = Field(default="USD", max_length=3)
    primary_llms: list[str] = Field(default_factory=list, sa_type=JSON)
    frameworks: list[str] = Field(default_factory=list, sa_type=JSON)
    programming_languages: list[str] = Field(default_factory=list, sa_type=JSON)
    status: str = Field(default=JobStatus.DRAFT, max_length=20, index=True)
    expires_at: Optional[datetime] = Field(sa_type=DateTime, default=None)


class Job(JobBase, table=True):
    """Entity for a job posting.

    Table: jobs
    """

    __tablename__ = "jobs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    company_id: str = Field(foreign_key="companies.id", index=True, max_length=64)
    view_count: int = Field(default=0)
    application_count: int = Field(default=0)
    published_at: Optional[datetime] = Field(sa_type=DateTime, default=None, index=True)
    is_deleted: bool = Field(default=False)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Job(id={self.id}, title={self.title}, status={self.status})"


class JobSkill(Base, table=True):
    """A skill requirement of a job with its expected 1..5 level."""

    __tablename__ = "job_skills"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    job_id: str = Field(foreign_key="jobs.id", index=True, max_length=64)
    skill_name: str = Field(max_length=100)
    required_level: int = Field(default=3, ge=1, le=5)
    is_required: bool = Field(default=True)


class JobApplication(Base, table=True):
    """A member's application to a job (one per job and user)."""

    __tablename__ = "job_applications"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uq_job_application_job_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    job_id: str = Field(foreign_key="jobs.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    status: str = Field(default=ApplicationStatus.PENDING, max_length=20, index=True)
    cover_letter: Optional[str] = Field(default=None)
    resume_url: Optional[str] = Field(default=None, max_length=500)
    reviewed_at: Optional[datetime] = Field(sa_type=DateTime, default=None)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"JobApplication(id={self.id}, job_id={self.job_id}, status={self.status})"


class SavedJob(Base, table=True):
    """A job bookmarked by a member."""

    __tablename__ = "saved_jobs"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_saved_job_user_job"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    job_id: str = Field(foreign_key="jobs.id", index=True, max_length=64)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
