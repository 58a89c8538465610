"""
Notification entity model.

Notifications are created by services (new application, application status
change, new follower) and read through the notifications API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class NotificationType:
    APPLICATION_RECEIVED = "application_received"
    APPLICATION_STATUS = "application_status"
    NEW_FOLLOWER = "new_follower"


class Notification(Base, table=True):
    """Entity for an in-app notification.

    Table: notifications
    """

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    type: str = Field(max_length=50)
    title: str = Field(max_length=200)
    message: str
    action_url: Optional[str] = Field(default=None, max_length=500)
    read_at: Optional[datetime] = Field(sa_type=DateTime, default=None)

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
