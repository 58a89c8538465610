"""
Schema models for jobs, applications and saved jobs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import ApplicationStatusLiteral, ExperienceLevel, JobStatusLiteral, JobType, WorkLocation

JobSort = Literal["published_at", "salary_max", "view_count"]


class JobSkillIn(BaseModel):
    skill_name: str = Field(min_length=1, max_length=100)
    required_level: int = Field(default=3, ge=1, le=5)
    is_required: bool = True


class JobSkillRead(JobSkillIn):
    model_config = ConfigDict(from_attributes=True)


def _check_salary_band(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        raise ValueError("salary_max must be greater than or equal to salary_min")


class JobCreate(BaseModel):
    """Schema for posting a job."""

    company_id: str
    title: str = Field(min_length=5, max_length=200)
    description: str = Field(min_length=20)
    requirements: Optional[str] = None
    job_type: JobType
    work_location: WorkLocation
    experience_level: ExperienceLevel
    location: Optional[str] = Field(default=None, max_length=200)
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    salary_currency: str = Field(default="USD", min_length=3, max_length=3)
    primary_llms: List[str] = Field(default_factory=list)
    frameworks: List[str] = Field(default_factory=list)
    programming_languages: List[str] = Field(default_factory=list)
    skills: List[JobSkillIn] = Field(default_factory=list)
    status: JobStatusLiteral = "draft"
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_salary(self) -> "JobCreate":
        _check_salary_band(self.salary_min, self.salary_max)
        return self


class JobUpdate(BaseModel):
    """Schema for updating a job. ``skills``, when given, replaces the whole list."""

    title: Optional[str] = Field(default=None, min_length=5, max_length=200)
    description: Optional[str] = Field(default=None, min_length=20)
    requirements: Optional[str] = None
    job_type: Optional[JobType] = None
    work_location: Optional[WorkLocation] = None
    experience_level: Optional[ExperienceLevel] = None
    location: Optional[str] = Field(default=None, max_length=200)
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    primary_llms: Optional[List[str]] = None
    frameworks: Optional[List[str]] = None
    programming_languages: Optional[List[str]] = None
    skills: Optional[List[JobSkillIn]] = None
    status: Optional[JobStatusLiteral] = None
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_salary(self) -> "JobUpdate":
        _check_salary_band(self.salary_min, self.salary_max)
        return self


class MatchScoreRead(BaseModel):
    score: int = Field(ge=0, le=100)
    breakdown: Dict[str, int]
    explanation: List[str]


class JobRead(BaseModel):
    id: str
    company_id: str
    title: str
    description: str
    requirements: Optional[str] = None
    job_type: str
    work_location: str
    experience_level: str
    location: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: str
    primary_llms: List[str]
    frameworks: List[str]
    programming_languages: List[str]
    status: str
    view_count: int
    application_count: int
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime
    skills: List[JobSkillRead] = Field(default_factory=list)
    match_score: Optional[MatchScoreRead] = None

    model_config = ConfigDict(from_attributes=True)


class CloseExpiredResult(BaseModel):
    closed: int


class ApplicationCreate(BaseModel):
    cover_letter: Optional[str] = Field(default=None, max_length=5000)
    resume_url: Optional[str] = Field(default=None, max_length=500)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatusLiteral


class ApplicationRead(BaseModel):
    id: str
    job_id: str
    user_id: str
    status: str
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SavedJobRead(BaseModel):
    id: str
    job_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
