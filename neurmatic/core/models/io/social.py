"""
Schema models for follows and notifications.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FollowRead(BaseModel):
    id: str
    follower_id: str
    following_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FollowUserRead(BaseModel):
    user_id: str
    username: str
    followed_at: datetime


class NotificationRead(BaseModel):
    id: str
    type: str
    title: str
    message: str
    action_url: Optional[str] = None
    read_at: Optional[datetime] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCount(BaseModel):
    unread: int


class MarkAllReadResult(BaseModel):
    updated: int
