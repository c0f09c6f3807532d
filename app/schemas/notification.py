"""Notification API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.domain.enums import NotificationPriority, NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    created_at: datetime
    task_id: str | None = None
    is_read: bool
    read_at: datetime | None = None
    priority: NotificationPriority | None = None
    action_url: str | None = None


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
