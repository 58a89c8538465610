"""
Schema models for member profiles, skills, work history and job preferences.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import WorkLocation

AvailabilityStatus = Literal["actively_looking", "open_to_offers", "not_looking"]


class ProfileUpdate(BaseModel):
    """Schema for creating or updating the caller's profile. Unset fields are left untouched."""

    display_name: Optional[str] = Field(default=None, max_length=100)
    headline: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = Field(default=None, max_length=5000)
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=255)
    availability_status: Optional[AvailabilityStatus] = None
    years_experience: Optional[int] = Field(default=None, ge=0, le=70)


class ProfileRead(BaseModel):
    display_name: Optional[str] = None
    headline: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    availability_status: str = "not_looking"
    years_experience: Optional[int] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SkillCreate(BaseModel):
    skill_name: str = Field(min_length=1, max_length=100)
    skill_type: str = Field(default="technical", max_length=30)
    proficiency: int = Field(default=3, ge=1, le=5)


class SkillRead(BaseModel):
    id: str
    skill_name: str
    skill_type: str
    proficiency: int

    model_config = ConfigDict(from_attributes=True)


class TechStack(BaseModel):
    frameworks: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)


class ExperienceCreate(BaseModel):
    company_name: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_current: bool = False
    tech_stack: TechStack = Field(default_factory=TechStack)

    @model_validator(mode="after")
    def _check_dates(self) -> "ExperienceCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ExperienceRead(BaseModel):
    id: str
    company_name: str
    title: str
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_current: bool
    tech_stack: TechStack

    model_config = ConfigDict(from_attributes=True)


class ModelsUpdate(BaseModel):
    models: List[str] = Field(default_factory=list, max_length=50)


class ModelsRead(BaseModel):
    models: List[str]


class PreferencesUpdate(BaseModel):
    """Schema for the caller's job-search preferences."""

    work_locations: List[WorkLocation] = Field(default_factory=list)
    preferred_locations: List[str] = Field(default_factory=list)
    open_to_relocation: bool = False
    salary_expectation_min: Optional[int] = Field(default=None, ge=0)
    salary_expectation_max: Optional[int] = Field(default=None, ge=0)
    desired_roles: List[str] = Field(default_factory=list)
    desired_skills: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_salary(self) -> "PreferencesUpdate":
        low, high = self.salary_expectation_min, self.salary_expectation_max
        if low is not None and high is not None and low > high:
            raise ValueError("salary_expectation_min must not exceed salary_expectation_max")
        return self


class PreferencesRead(BaseModel):
    work_locations: List[str]
    preferred_locations: List[str]
    open_to_relocation: bool
    salary_expectation_min: Optional[int] = None
    salary_expectation_max: Optional[int] = None
    desired_roles: List[str]
    desired_skills: List[str]

    model_config = ConfigDict(from_attributes=True)


class PublicProfileRead(BaseModel):
    """Schema for a public profile page."""

    user_id: str
    username: str
    profile: Optional[ProfileRead] = None
    skills: List[SkillRead] = Field(default_factory=list)
    experiences: List[ExperienceRead] = Field(default_factory=list)
    models: List[str] = Field(default_factory=list)


class ProfileViewerRead(BaseModel):
    viewer_id: str
    username: Optional[str] = None
    viewed_at: datetime


class ProfileViewStats(BaseModel):
    days: int
    total_views: int
    unique_viewers: int
    recent_viewers: List[ProfileViewerRead]
