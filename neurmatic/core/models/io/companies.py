"""
Schema models for company API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CompanyBase(BaseModel):
    """Base fields for company schema."""

    description: Optional[str] = Field(default=None, max_length=5000)
    website: Optional[str] = Field(default=None, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=200)
    company_size: Optional[str] = Field(default=None, max_length=30)
    industry: Optional[str] = Field(default=None, max_length=100)
    benefits: List[str] = Field(default_factory=list, description="Benefits offered, e.g. 'Health insurance'")


class CompanyCreate(CompanyBase):
    name: str = Field(min_length=2, max_length=200)


class CompanyUpdate(BaseModel):
    """Schema for updating a company. Unset fields are left untouched."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    website: Optional[str] = Field(default=None, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=200)
    company_size: Optional[str] = Field(default=None, max_length=30)
    industry: Optional[str] = Field(default=None, max_length=100)
    benefits: Optional[List[str]] = None


class CompanyRead(CompanyBase):
    id: str
    name: str
    slug: str
    owner_id: str
    verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
