"""
Company entity model.

Companies own job postings. Only verified companies may publish jobs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class CompanyBase(Base):
    """Base fields for company entity."""

    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=200)
    company_size: Optional[str] = Field(default=None, max_length=30)
    industry: Optional[str] = Field(default=None, max_length=100)
    benefits: list[str] = Field(default_factory=list, sa_type=JSON)


class Company(CompanyBase, table=True):
    """Entity for an employer.

    Table: companies
    """

    __tablename__ = "companies"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    slug: str = Field(max_length=220, unique=True, index=True)
    owner_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    verified: bool = Field(default=False)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Company(id={self.id}, slug={self.slug}, verified={self.verified})"
