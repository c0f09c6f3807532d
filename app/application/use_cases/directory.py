"""Directory use cases: departments, user profiles, badges, and task templates."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from app.application.dtos.task import AssigneeInput, TaskCreate
from app.application.interfaces.repositories import (
    IDepartmentRepository,
    ITaskTemplateRepository,
    IUserRepository,
)
from app.application.services.authorization_service import AuthorizationService
from app.domain.entities.template import TaskTemplateEntity
from app.domain.entities.user import Badge, DepartmentEntity, UserEntity
from app.domain.enums import BadgeCriteria, Permission, UserStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid, generate_prefixed_id

logger = logging.getLogger(__name__)

# Created by seed_defaults when the department collection is empty.
DEFAULT_DEPARTMENTS: tuple[tuple[str, str], ...] = (
    ("BOH", "Back of House - Khu vực bếp và chế biến"),
    ("FOH", "Front of House - Khu vực phục vụ khách hàng"),
    ("Quản lý", "Quản lý và điều hành nhà hàng"),
    ("Hành chính", "Hành chính, kế toán và nhân sự"),
)

_DEPARTMENT_FIELDS = frozenset({"name", "description", "manager_id", "color"})
_PROFILE_FIELDS = frozenset({"name", "role", "status", "avatar"})
_SELF_PROFILE_FIELDS = frozenset({"name", "avatar"})
_TEMPLATE_FIELDS = frozenset(
    {
        "name",
        "title",
        "description",
        "dept",
        "priority",
        "checklist_items",
        "is_sequential",
        "default_assignees",
        "drive_url",
        "is_recurring",
        "recurring_config",
        "tags",
    }
)
_KNOWN_PERMISSIONS = frozenset(p.value for p in Permission)


def _reject_unknown(changes: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(changes) - allowed
    if unknown:
        first = sorted(unknown)[0]
        raise ValidationException(f"Field cannot be updated: {first}", field=first)


class DirectoryService:
    """Departments, user profiles and templates (the admin side of the dashboard)."""

    def __init__(
        self,
        department_repo: IDepartmentRepository,
        user_repo: IUserRepository,
        template_repo: ITaskTemplateRepository,
        authorization: AuthorizationService | None = None,
    ) -> None:
        self.department_repo = department_repo
        self.user_repo = user_repo
        self.template_repo = template_repo
        self.authorization = authorization or AuthorizationService()

    # ---- Departments ----

    async def list_departments(self) -> list[DepartmentEntity]:
        return await self.department_repo.list_departments()

    async def _department_name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        wanted = name.strip().casefold()
        for dept in await self.department_repo.list_departments():
            if dept.id != exclude_id and dept.name.strip().casefold() == wanted:
                return True
        return False

    async def create_department(
        self,
        actor: UserEntity,
        name: str,
        description: str | None = None,
        manager_id: str | None = None,
        color: str | None = None,
    ) -> DepartmentEntity:
        """Create a department. Names are unique (case-insensitive)."""
        self.authorization.require_permission(actor, Permission.MANAGE_DEPARTMENTS)
        if await self._department_name_taken(name):
            raise ValidationException(f"Department already exists: {name}", field="name")
        department = DepartmentEntity(
            id=generate_cuid(),
            name=name.strip(),
            description=description,
            manager_id=manager_id,
            color=color,
            created_at=utc_now(),
        )
        created = await self.department_repo.create(department)
        logger.info("Department %s (%s) created by %s", created.id, created.name, actor.id)
        return created

    async def update_department(
        self, actor: UserEntity, department_id: str, changes: dict[str, Any]
    ) -> DepartmentEntity:
        self.authorization.require_permission(actor, Permission.MANAGE_DEPARTMENTS)
        _reject_unknown(changes, _DEPARTMENT_FIELDS)
        department = await self.department_repo.get_by_id(department_id)
        if department is None:
            raise ResourceNotFoundException("department", department_id)
        if "name" in changes and await self._department_name_taken(
            changes["name"], exclude_id=department_id
        ):
            raise ValidationException(
                f"Department already exists: {changes['name']}", field="name"
            )
        updated = replace(department, **changes, updated_at=utc_now())
        await self.department_repo.update(updated, {*changes, "updated_at"})
        return updated

    async def delete_department(self, actor: UserEntity, department_id: str) -> None:
        self.authorization.require_permission(actor, Permission.MANAGE_DEPARTMENTS)
        if not await self.department_repo.delete(department_id):
            raise ResourceNotFoundException("department", department_id)
        logger.info("Department %s deleted by %s", department_id, actor.id)

    async def seed_defaults(self) -> list[DepartmentEntity]:
        """Create the default departments if none exist; return what was created."""
        if await self.department_repo.list_departments():
            return []
        created: list[DepartmentEntity] = []
        for name, description in DEFAULT_DEPARTMENTS:
            created.append(
                await self.department_repo.create(
                    DepartmentEntity(
                        id=generate_cuid(),
                        name=name,
                        description=description,
                        created_at=utc_now(),
                    )
                )
            )
        logger.info("Seeded %d default departments", len(created))
        return created

    # ---- Users ----

    async def list_users(self, dept: str | None = None) -> list[UserEntity]:
        return await self.user_repo.list_users(dept=dept)

    async def get_user(self, user_id: str) -> UserEntity:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def move_user_to_department(
        self, actor: UserEntity, user_id: str, dept_name: str
    ) -> UserEntity:
        """Reassign a user's department (by department name)."""
        self.authorization.require_permission(actor, Permission.MANAGE_USERS)
        names = {d.name for d in await self.department_repo.list_departments()}
        if dept_name not in names:
            raise ResourceNotFoundException("department", dept_name)
        user = await self.get_user(user_id)
        updated = replace(user, dept=dept_name)
        await self.user_repo.update(updated, {"dept"})
        logger.info("User %s moved to %s by %s", user_id, dept_name, actor.id)
        return updated

    async def update_permissions(
        self, actor: UserEntity, user_id: str, permissions: list[str]
    ) -> UserEntity:
        """Replace a user's permission set. Unknown names are rejected."""
        self.authorization.require_permission(actor, Permission.MANAGE_USERS)
        unknown = sorted(set(permissions) - _KNOWN_PERMISSIONS)
        if unknown:
            raise ValidationException(
                f"Unknown permissions: {', '.join(unknown)}", field="permissions"
            )
        user = await self.get_user(user_id)
        updated = replace(user, permissions=set(permissions))
        await self.user_repo.update(updated, {"permissions"})
        logger.info("Permissions of %s set to %s by %s", user_id, sorted(permissions), actor.id)
        return updated

    async def update_profile(
        self, actor: UserEntity, user_id: str, changes: dict[str, Any]
    ) -> UserEntity:
        """Update display fields; users may edit their own name and avatar."""
        if not (actor.id == user_id and set(changes) <= _SELF_PROFILE_FIELDS):
            self.authorization.require_permission(actor, Permission.MANAGE_USERS)
        _reject_unknown(changes, _PROFILE_FIELDS)
        if "status" in changes:
            changes = {**changes, "status": UserStatus(changes["status"])}
        user = await self.get_user(user_id)
        updated = replace(user, **changes)
        await self.user_repo.update(updated, set(changes))
        return updated

    async def award_badge(
        self,
        actor: UserEntity,
        user_id: str,
        name: str,
        description: str,
        icon: str = "award",
        color: str = "orange",
        criteria_type: BadgeCriteria = BadgeCriteria.TASK_COUNT,
        threshold: int = 5,
    ) -> Badge:
        """Append a badge to the user's profile."""
        self.authorization.require_any(actor, Permission.MANAGE_USERS, Permission.VIEW_REPORTS)
        if not name or not name.strip():
            raise ValidationException("Badge name is required", field="name")
        if threshold < 0:
            raise ValidationException("Badge threshold cannot be negative", field="threshold")
        user = await self.get_user(user_id)
        badge = Badge(
            id=generate_prefixed_id("badge"),
            name=name.strip(),
            description=description,
            icon=icon,
            color=color,
            criteria_type=criteria_type,
            threshold=threshold,
            created_at=utc_now(),
        )
        await self.user_repo.update(replace(user, badges=[*user.badges, badge]), {"badges"})
        return badge

    # ---- Templates ----

    async def list_templates(self) -> list[TaskTemplateEntity]:
        return await self.template_repo.list_templates()

    async def get_template(self, template_id: str) -> TaskTemplateEntity:
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise ResourceNotFoundException("template", template_id)
        return template

    async def create_template(
        self, actor: UserEntity, template: TaskTemplateEntity
    ) -> TaskTemplateEntity:
        self.authorization.require_any(actor, Permission.CREATE_TASKS, Permission.MANAGE_TASKS)
        if template.is_sequential and not template.default_assignees:
            raise ValidationException(
                "Sequential template requires at least one default assignee",
                field="default_assignees",
            )
        stamped = replace(
            template,
            id=template.id or generate_cuid(),
            created_by=actor.id,
            created_at=utc_now(),
        )
        return await self.template_repo.create(stamped)

    async def update_template(
        self, actor: UserEntity, template_id: str, changes: dict[str, Any]
    ) -> TaskTemplateEntity:
        self.authorization.require_any(actor, Permission.CREATE_TASKS, Permission.MANAGE_TASKS)
        _reject_unknown(changes, _TEMPLATE_FIELDS)
        template = await self.get_template(template_id)
        updated = replace(template, **changes, updated_at=utc_now())
        await self.template_repo.update(updated, {*changes, "updated_at"})
        return updated

    async def delete_template(self, actor: UserEntity, template_id: str) -> None:
        self.authorization.require_any(actor, Permission.CREATE_TASKS, Permission.MANAGE_TASKS)
        if not await self.template_repo.delete(template_id):
            raise ResourceNotFoundException("template", template_id)

    async def apply_template(
        self,
        template_id: str,
        responsible: str = "",
        accountable: str = "",
    ) -> TaskCreate:
        """Build a pre-filled task draft from a template.

        Default assignees are resolved to the first user holding each role;
        roles with no matching user are skipped.
        """
        template = await self.get_template(template_id)
        assignees: list[AssigneeInput] = []
        if template.is_sequential:
            users = await self.user_repo.list_users()
            for slot in template.default_assignees:
                match = next((u for u in users if u.role == slot.role), None)
                if match is not None:
                    assignees.append(
                        AssigneeInput(user_id=match.id, time_allocation=slot.time_allocation)
                    )
        return TaskCreate(
            title=template.title,
            description=template.description,
            responsible=assignees[0].user_id if assignees else responsible,
            accountable=accountable,
            dept=template.dept,
            priority=template.priority,
            is_sequential=template.is_sequential and bool(assignees),
            assignees=tuple(assignees),
            checklist_items=tuple(template.checklist_items),
            drive_url=template.drive_url,
            is_recurring=template.is_recurring,
            recurring_config=template.recurring_config,
            tags=tuple(template.tags),
        )
