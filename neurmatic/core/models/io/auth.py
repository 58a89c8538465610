"""
Schema models for authentication requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    email: EmailStr
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_\-]+$")
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    """Schema for reading a member account. Never carries the password hash."""

    id: str
    email: str
    username: str
    role: str
    status: str
    email_verified: bool
    last_login_at: Optional[datetime] = None
    login_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
