"""Notification domain entity."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import NotificationPriority, NotificationType


@dataclass
class NotificationEntity:
    """Message addressed to one user, optionally about one task."""

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    created_at: datetime
    task_id: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    priority: NotificationPriority | None = None
    action_url: str | None = None

    def mark_read(self, at: datetime) -> None:
        """Set read state. Idempotent: read_at keeps the first read time."""
        if self.is_read:
            return
        self.is_read = True
        self.read_at = at
