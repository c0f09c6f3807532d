"""In-memory repository implementations (same contracts as the Firestore ones).

Used for local development and tests. Subscriptions fire synchronously on
every write to the backing collection.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

from app.application.interfaces.repositories import SnapshotCallback
from app.domain.entities.notification import NotificationEntity
from app.domain.entities.task import TaskEntity
from app.domain.entities.template import TaskTemplateEntity
from app.domain.entities.user import DepartmentEntity, UserEntity
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.memory.store import InMemoryStore, MemorySubscription

TASKS = "tasks"
USERS = "users"
DEPARTMENTS = "departments"
NOTIFICATIONS = "notifications"
TEMPLATES = "taskTemplates"


def _newest_first(tasks: list[TaskEntity]) -> list[TaskEntity]:
    return sorted(tasks, key=lambda t: (t.created, t.id), reverse=True)


class _Repository:
    """Shared create/get/update/delete over one store collection."""

    collection: str = ""
    resource: str = ""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def _create(self, entity):
        if self._store.get(self.collection, entity.id) is not None:
            raise ValidationException(
                f"{self.resource} already exists: {entity.id}", field="id"
            )
        self._store.put(self.collection, entity.id, entity)
        return entity

    async def get_by_id(self, entity_id: str):
        return self._store.get(self.collection, entity_id)

    async def update(self, entity, fields: Collection[str]) -> None:
        if not self._store.patch(self.collection, entity.id, entity, set(fields)):
            raise ResourceNotFoundException(self.resource, entity.id)

    async def delete(self, entity_id: str) -> bool:
        return self._store.delete(self.collection, entity_id)


class InMemoryTaskRepository(_Repository):
    collection = TASKS
    resource = "task"

    async def create(self, task: TaskEntity) -> TaskEntity:
        return await self._create(task)

    async def list_tasks(
        self,
        *,
        dept: str | None = None,
        status: str | None = None,
        responsible: str | None = None,
    ) -> list[TaskEntity]:
        tasks = self._store.all(TASKS)
        if dept is not None:
            tasks = [t for t in tasks if t.dept == dept]
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        if responsible is not None:
            tasks = [t for t in tasks if t.responsible == responsible]
        return _newest_first(tasks)

    async def list_page(
        self, limit: int, cursor: str | None = None
    ) -> tuple[list[TaskEntity], bool]:
        tasks = _newest_first(self._store.all(TASKS))
        start = 0
        if cursor is not None:
            ids = [t.id for t in tasks]
            if cursor not in ids:
                raise ResourceNotFoundException("task", cursor)
            start = ids.index(cursor) + 1
        page = tasks[start : start + limit]
        return page, start + limit < len(tasks)

    async def list_due_between(self, start: datetime, end: datetime) -> list[TaskEntity]:
        tasks = [t for t in self._store.all(TASKS) if start < t.due <= end]
        return sorted(tasks, key=lambda t: t.due)

    def subscribe(self, callback: SnapshotCallback) -> MemorySubscription:
        return self._store.listen(TASKS, lambda: callback(_newest_first(self._store.all(TASKS))))


class InMemoryUserRepository(_Repository):
    collection = USERS
    resource = "user"

    async def create(self, user: UserEntity) -> UserEntity:
        return await self._create(user)

    async def get_by_email(self, email: str) -> UserEntity | None:
        return next((u for u in self._store.all(USERS) if u.email == email), None)

    async def list_users(self, *, dept: str | None = None) -> list[UserEntity]:
        users = self._store.all(USERS)
        if dept is not None:
            users = [u for u in users if u.dept == dept]
        return sorted(users, key=lambda u: u.name)

    def subscribe(self, callback: SnapshotCallback) -> MemorySubscription:
        return self._store.listen(
            USERS, lambda: callback(sorted(self._store.all(USERS), key=lambda u: u.name))
        )


class InMemoryDepartmentRepository(_Repository):
    collection = DEPARTMENTS
    resource = "department"

    async def create(self, department: DepartmentEntity) -> DepartmentEntity:
        return await self._create(department)

    async def list_departments(self) -> list[DepartmentEntity]:
        return sorted(self._store.all(DEPARTMENTS), key=lambda d: d.name)

    def subscribe(self, callback: SnapshotCallback) -> MemorySubscription:
        return self._store.listen(
            DEPARTMENTS,
            lambda: callback(sorted(self._store.all(DEPARTMENTS), key=lambda d: d.name)),
        )


class InMemoryNotificationRepository(_Repository):
    collection = NOTIFICATIONS
    resource = "notification"

    async def create(self, notification: NotificationEntity) -> NotificationEntity:
        return await self._create(notification)

    def _for_user(self, user_id: str) -> list[NotificationEntity]:
        items = [n for n in self._store.all(NOTIFICATIONS) if n.user_id == user_id]
        return sorted(items, key=lambda n: (n.created_at, n.id), reverse=True)

    async def list_for_user(self, user_id: str) -> list[NotificationEntity]:
        return self._for_user(user_id)

    async def mark_read(self, notification_id: str, read_at: datetime) -> None:
        notification = self._store.get(NOTIFICATIONS, notification_id)
        if notification is None:
            raise ResourceNotFoundException("notification", notification_id)
        notification.mark_read(read_at)
        self._store.patch(
            NOTIFICATIONS, notification_id, notification, {"is_read", "read_at"}
        )

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        unread = [n.id for n in self._for_user(user_id) if not n.is_read]
        return self._store.patch_many(
            NOTIFICATIONS, {nid: {"is_read": True, "read_at": read_at} for nid in unread}
        )

    def subscribe(self, user_id: str, callback: SnapshotCallback) -> MemorySubscription:
        return self._store.listen(NOTIFICATIONS, lambda: callback(self._for_user(user_id)))


class InMemoryTaskTemplateRepository(_Repository):
    collection = TEMPLATES
    resource = "template"

    async def create(self, template: TaskTemplateEntity) -> TaskTemplateEntity:
        return await self._create(template)

    async def list_templates(self) -> list[TaskTemplateEntity]:
        return sorted(self._store.all(TEMPLATES), key=lambda t: t.name)
