"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.

Partial updates name the entity attributes to write (e.g. {"status",
"assignees"}); implementations translate them to their own field names.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.entities.notification import NotificationEntity
    from app.domain.entities.task import TaskEntity
    from app.domain.entities.template import TaskTemplateEntity
    from app.domain.entities.user import DepartmentEntity, UserEntity

# Receives the full, current snapshot of the subscribed collection/query.
SnapshotCallback = Callable[[list], None]


class Subscription(Protocol):
    """Handle returned by subscribe(); cancel() stops further callbacks."""

    @property
    def active(self) -> bool:
        """True until cancel() is called."""

    def cancel(self) -> None:
        """Stop delivering snapshots. Idempotent."""


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task persistence (DIP)."""

    async def create(self, task: TaskEntity) -> TaskEntity:
        """Persist a new task under task.id and return it."""

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        """Return task by ID or None."""

    async def update(self, task: TaskEntity, fields: Collection[str]) -> None:
        """Write only the named attributes of task. Raises ResourceNotFoundException if missing."""

    async def delete(self, task_id: str) -> bool:
        """Delete task; return False if it did not exist."""

    async def list_tasks(
        self,
        *,
        dept: str | None = None,
        status: str | None = None,
        responsible: str | None = None,
    ) -> list[TaskEntity]:
        """Return tasks matching all given equality filters, newest created first."""

    async def list_page(
        self, limit: int, cursor: str | None = None
    ) -> tuple[list[TaskEntity], bool]:
        """Return up to limit tasks (newest first) after the task id cursor, and has_more."""

    async def list_due_between(self, start: datetime, end: datetime) -> list[TaskEntity]:
        """Return tasks whose due time is in (start, end]."""

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """Deliver the full task list to callback now and on every change."""


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user profiles (DIP). Credentials live in the identity provider."""

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserEntity | None:
        """Return user by email (exact match)."""

    async def list_users(self, *, dept: str | None = None) -> list[UserEntity]:
        """Return users, optionally filtered by department name."""

    async def create(self, user: UserEntity) -> UserEntity:
        """Persist a profile under user.id (the identity provider uid)."""

    async def update(self, user: UserEntity, fields: Collection[str]) -> None:
        """Write only the named attributes. Raises ResourceNotFoundException if missing."""

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """Deliver the full user list to callback now and on every change."""


# Department repository interface
class IDepartmentRepository(Protocol):
    """Protocol for departments (DIP)."""

    async def get_by_id(self, department_id: str) -> DepartmentEntity | None:
        """Return department by ID."""

    async def list_departments(self) -> list[DepartmentEntity]:
        """Return all departments ordered by name."""

    async def create(self, department: DepartmentEntity) -> DepartmentEntity:
        """Persist a new department."""

    async def update(self, department: DepartmentEntity, fields: Collection[str]) -> None:
        """Write only the named attributes."""

    async def delete(self, department_id: str) -> bool:
        """Delete department; return False if it did not exist."""

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """Deliver the full department list to callback now and on every change."""


# Notification repository interface
class INotificationRepository(Protocol):
    """Protocol for notifications (DIP)."""

    async def create(self, notification: NotificationEntity) -> NotificationEntity:
        """Persist a new notification."""

    async def get_by_id(self, notification_id: str) -> NotificationEntity | None:
        """Return notification by ID."""

    async def list_for_user(self, user_id: str) -> list[NotificationEntity]:
        """Return the user's notifications, newest first."""

    async def mark_read(self, notification_id: str, read_at: datetime) -> None:
        """Set is_read/read_at on one notification."""

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        """Mark every unread notification of user_id read in one batch write; return count."""

    def subscribe(self, user_id: str, callback: SnapshotCallback) -> Subscription:
        """Deliver the user's notifications (newest first) now and on every change."""


# Task template repository interface
class ITaskTemplateRepository(Protocol):
    """Protocol for task templates (DIP)."""

    async def create(self, template: TaskTemplateEntity) -> TaskTemplateEntity:
        """Persist a new template."""

    async def get_by_id(self, template_id: str) -> TaskTemplateEntity | None:
        """Return template by ID."""

    async def list_templates(self) -> list[TaskTemplateEntity]:
        """Return all templates ordered by name."""

    async def update(self, template: TaskTemplateEntity, fields: Collection[str]) -> None:
        """Write only the named attributes."""

    async def delete(self, template_id: str) -> bool:
        """Delete template; return False if it did not exist."""
