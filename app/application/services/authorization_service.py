"""Authorization service: permission checks against the user's permission set."""

from __future__ import annotations

from app.domain.entities.task import TaskEntity
from app.domain.entities.user import UserEntity
from app.domain.enums import Permission
from app.domain.exceptions import AuthorizationException


class AuthorizationService:
    """Centralized permission checking. 'admin' grants every permission."""

    def check_permission(self, user: UserEntity, permission: str | Permission) -> bool:
        """Return True if user holds permission (or admin)."""
        return user.has_permission(permission)

    def require_permission(self, user: UserEntity, permission: str | Permission) -> None:
        """Raise AuthorizationException if user lacks permission."""
        if not self.check_permission(user, permission):
            name = permission.value if isinstance(permission, Permission) else permission
            raise AuthorizationException(permission=name)

    def require_any(self, user: UserEntity, *permissions: str | Permission) -> None:
        """Raise AuthorizationException unless user holds at least one of permissions."""
        if not user.has_any_permission(*permissions):
            names = [p.value if isinstance(p, Permission) else p for p in permissions]
            raise AuthorizationException(permission=" | ".join(names))

    def can_view_task(self, user: UserEntity, task: TaskEntity) -> bool:
        """Any holder of view_tasks sees the shared task board; managers always do."""
        return user.has_any_permission(Permission.VIEW_TASKS, Permission.MANAGE_TASKS)

    def can_edit_task(self, user: UserEntity, task: TaskEntity) -> bool:
        """Holders of manage_tasks or update_tasks edit any task; others only tasks they are on."""
        if user.has_any_permission(Permission.MANAGE_TASKS, Permission.UPDATE_TASKS):
            return True
        return task.involves(user.id)

    def visible_tasks(self, user: UserEntity, tasks: list[TaskEntity]) -> list[TaskEntity]:
        """Filter tasks down to those user may view."""
        return [t for t in tasks if self.can_view_task(user, t)]
