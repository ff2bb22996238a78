"""Deadline notifications published to the admin session that owns a monitor."""

from datetime import datetime
from sqlmodel import SQLModel, Field
from .enums import NotificationLevel


class DeadlineNotification(SQLModel):
    level: NotificationLevel
    id_project: int
    project_title: str
    message: str
    auto_closed: bool = False
    created_at: datetime = Field(default_factory=datetime.now)


class MonitorStatus(SQLModel):
    admin_username: str
    running: bool
    interval_seconds: int
    pending_notifications: int
    last_scan_at: datetime | None = None
