"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    DepartmentEntity,
    NotificationEntity,
    TaskAssignee,
    TaskEntity,
    TaskTemplateEntity,
    UserEntity,
)
from app.domain.enums import (
    GateState,
    NotificationType,
    Permission,
    TaskPriority,
    TaskStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BackingStoreException,
    DashboardException,
    EmptyAssigneeListException,
    ResourceNotFoundException,
    TaskBlockedException,
    ValidationException,
)

__all__ = [
    # Entities
    "DepartmentEntity",
    "NotificationEntity",
    "TaskAssignee",
    "TaskEntity",
    "TaskTemplateEntity",
    "UserEntity",
    # Enums
    "GateState",
    "NotificationType",
    "Permission",
    "TaskPriority",
    "TaskStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "BackingStoreException",
    "DashboardException",
    "EmptyAssigneeListException",
    "ResourceNotFoundException",
    "TaskBlockedException",
    "ValidationException",
]
