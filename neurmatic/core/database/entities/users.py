"""
User and profile entity models.

This module contains the account record and everything hanging off a member
profile: skills, the LLMs the member works with, work history, job-search
preferences and profile view tracking. These rows are the candidate side of
job matching.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserRole:
    USER = "user"
    PREMIUM = "premium"
    COMPANY = "company"
    MODERATOR = "moderator"
    ADMIN = "admin"

    ALL = (USER, PREMIUM, COMPANY, MODERATOR, ADMIN)


class UserStatus:
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"
    DELETED = "deleted"

    ALL = (ACTIVE, SUSPENDED, BANNED, DELETED)


class UserBase(Base):
    """Base fields for user entity."""

    email: str = Field(max_length=255, unique=True, index=True)
    username: str = Field(max_length=50, unique=True, index=True)
    role: str = Field(default=UserRole.USER, max_length=20, index=True)
    status: str = Field(default=UserStatus.ACTIVE, max_length=20)
    email_verified: bool = Field(default=False)


class User(UserBase, table=True):
    """Entity for a member account.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    password_hash: str = Field(max_length=255)
    last_login_at: Optional[datetime] = Field(sa_type=DateTime, default=None)
    login_count: int = Field(default=0)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"


class Profile(Base, table=True):
    """Public profile of a member (one per user)."""

    __tablename__ = "profiles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=64)
    display_name: Optional[str] = Field(default=None, max_length=100)
    headline: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=255)
    availability_status: str = Field(default="not_looking", max_length=30)
    years_experience: Optional[int] = Field(default=None)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class UserSkill(Base, table=True):
    """A skill declared by a member with a 1..5 proficiency."""

    __tablename__ = "user_skills"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    skill_name: str = Field(max_length=100)
    skill_type: str = Field(default="technical", max_length=30)
    proficiency: int = Field(default=3, ge=1, le=5)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)


class UserModel(Base, table=True):
    """An LLM the member works with (e.g. ``gpt-4``, ``claude``)."""

    __tablename__ = "user_models"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    model_name: str = Field(max_length=100)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)


class WorkExperience(Base, table=True):
    """A position in the member's work history.

    ``tech_stack`` holds ``{"frameworks": [...], "languages": [...]}``.
    """

    __tablename__ = "work_experiences"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    company_name: str = Field(max_length=200)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    start_date: Optional[datetime] = Field(sa_type=DateTime, default=None)
    end_date: Optional[datetime] = Field(sa_type=DateTime, default=None)
    is_current: bool = Field(default=False)
    tech_stack: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)


class JobPreferences(Base, table=True):
    """Job-search preferences of a member (one per user)."""

    __tablename__ = "job_preferences"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=64)
    work_locations: list[str] = Field(default_factory=list, sa_type=JSON)
    preferred_locations: list[str] = Field(default_factory=list, sa_type=JSON)
    open_to_relocation: bool = Field(default=False)
    salary_expectation_min: Optional[int] = Field(default=None)
    salary_expectation_max: Optional[int] = Field(default=None)
    desired_roles: list[str] = Field(default_factory=list, sa_type=JSON)
    desired_skills: list[str] = Field(default_factory=list, sa_type=JSON)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class ProfileView(Base, table=True):
    """One view of a profile. ``viewer_id`` is None for anonymous visitors."""

    __tablename__ = "profile_views"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    profile_user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    viewer_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    viewed_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
