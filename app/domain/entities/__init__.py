"""Domain entities and aggregates.

Pure domain models; no persistence concerns.
"""

from app.domain.entities.notification import NotificationEntity
from app.domain.entities.task import (
    RecurringConfig,
    TaskAssignee,
    TaskAttachment,
    TaskComment,
    TaskEntity,
    TaskFeedback,
)
from app.domain.entities.template import TaskTemplateEntity, TemplateAssignee
from app.domain.entities.user import Badge, DepartmentEntity, UserEntity

__all__ = [
    "Badge",
    "DepartmentEntity",
    "NotificationEntity",
    "RecurringConfig",
    "TaskAssignee",
    "TaskAttachment",
    "TaskComment",
    "TaskEntity",
    "TaskFeedback",
    "TaskTemplateEntity",
    "TemplateAssignee",
    "UserEntity",
]
