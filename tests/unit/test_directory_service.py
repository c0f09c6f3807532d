"""DirectoryService tests: departments, profiles, badges and templates."""

import pytest

from app.application.use_cases.directory import DEFAULT_DEPARTMENTS, DirectoryService
from app.domain.entities.template import TaskTemplateEntity, TemplateAssignee
from app.domain.enums import BadgeCriteria, Permission, TaskPriority, UserStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.backend import build_memory_backend
from tests.factories import make_user

ADMIN = make_user("admin", name="Admin", permissions={Permission.ADMIN.value})
STAFF = make_user("staff", name="Staff", role="Server", dept="FOH")
CHEF = make_user("chef", name="Chef", role="Head Chef")


@pytest.fixture
async def env():
    backend = build_memory_backend()
    for user in (ADMIN, STAFF, CHEF):
        await backend.users.create(user)
    return backend, DirectoryService(backend.departments, backend.users, backend.templates)


def _template(**overrides) -> TaskTemplateEntity:
    values = dict(
        id="",
        name="Closing",
        title="Close the restaurant",
        description="End of day routine",
        dept="BOH",
        priority=TaskPriority.HIGH,
        checklist_items=["Lights", "Gas"],
        is_sequential=True,
        default_assignees=[TemplateAssignee("Head Chef", 1), TemplateAssignee("Server", 0.5)],
    )
    values.update(overrides)
    return TaskTemplateEntity(**values)


class TestDepartments:
    async def test_seed_only_when_empty(self, env) -> None:
        _, directory = env
        created = await directory.seed_defaults()
        assert len(created) == len(DEFAULT_DEPARTMENTS)
        assert await directory.seed_defaults() == []

    async def test_names_are_unique_case_insensitive(self, env) -> None:
        _, directory = env
        await directory.create_department(ADMIN, "BOH")
        with pytest.raises(ValidationException):
            await directory.create_department(ADMIN, " boh ")

    async def test_update_and_delete(self, env) -> None:
        _, directory = env
        dept = await directory.create_department(ADMIN, "Bar", color="#123456")
        updated = await directory.update_department(ADMIN, dept.id, {"name": "Bar & Lounge"})
        assert updated.name == "Bar & Lounge"
        assert updated.updated_at is not None
        with pytest.raises(ValidationException):
            await directory.update_department(ADMIN, dept.id, {"id": "other"})
        await directory.delete_department(ADMIN, dept.id)
        with pytest.raises(ResourceNotFoundException):
            await directory.delete_department(ADMIN, dept.id)

    async def test_requires_permission(self, env) -> None:
        _, directory = env
        with pytest.raises(AuthorizationException):
            await directory.create_department(STAFF, "Bar")


class TestUsers:
    async def test_move_to_existing_department_only(self, env) -> None:
        _, directory = env
        await directory.seed_defaults()
        moved = await directory.move_user_to_department(ADMIN, "staff", "BOH")
        assert moved.dept == "BOH"
        with pytest.raises(ResourceNotFoundException):
            await directory.move_user_to_department(ADMIN, "staff", "Nowhere")

    async def test_update_permissions_rejects_unknown(self, env) -> None:
        _, directory = env
        updated = await directory.update_permissions(ADMIN, "staff", ["view_tasks", "create_tasks"])
        assert updated.permissions == {"view_tasks", "create_tasks"}
        with pytest.raises(ValidationException):
            await directory.update_permissions(ADMIN, "staff", ["fly"])

    async def test_self_service_profile_edit(self, env) -> None:
        _, directory = env
        updated = await directory.update_profile(STAFF, "staff", {"name": "Sam"})
        assert updated.name == "Sam"
        with pytest.raises(AuthorizationException):
            await directory.update_profile(STAFF, "staff", {"role": "Manager"})
        deactivated = await directory.update_profile(ADMIN, "staff", {"status": "inactive"})
        assert deactivated.status == UserStatus.INACTIVE

    async def test_award_badge(self, env) -> None:
        backend, directory = env
        badge = await directory.award_badge(
            ADMIN, "staff", "Fast hands", "Ten tasks", criteria_type=BadgeCriteria.STREAK
        )
        assert badge.id.startswith("badge")
        stored = await backend.users.get_by_id("staff")
        assert [b.name for b in stored.badges] == ["Fast hands"]
        with pytest.raises(ValidationException):
            await directory.award_badge(ADMIN, "staff", " ", "")


class TestTemplates:
    async def test_create_requires_default_assignees_for_sequential(self, env) -> None:
        _, directory = env
        with pytest.raises(ValidationException):
            await directory.create_template(ADMIN, _template(default_assignees=[]))
        with pytest.raises(AuthorizationException):
            await directory.create_template(STAFF, _template())

    async def test_apply_resolves_roles_to_users(self, env) -> None:
        _, directory = env
        template = await directory.create_template(ADMIN, _template())
        assert template.id and template.created_by == "admin"
        draft = await directory.apply_template(template.id, accountable="admin")
        assert [a.user_id for a in draft.assignees] == ["chef", "staff"]
        assert draft.responsible == "chef"
        assert draft.is_sequential is True
        assert draft.checklist_items == ("Lights", "Gas")

    async def test_apply_with_unmatched_roles_falls_back_to_regular(self, env) -> None:
        _, directory = env
        template = await directory.create_template(
            ADMIN, _template(default_assignees=[TemplateAssignee("Sommelier", 1)])
        )
        draft = await directory.apply_template(template.id, responsible="staff")
        assert draft.is_sequential is False
        assert draft.responsible == "staff"

    async def test_update_and_delete(self, env) -> None:
        _, directory = env
        template = await directory.create_template(ADMIN, _template())
        updated = await directory.update_template(ADMIN, template.id, {"title": "Close up"})
        assert updated.title == "Close up"
        assert [t.name for t in await directory.list_templates()] == ["Closing"]
        await directory.delete_template(ADMIN, template.id)
        with pytest.raises(ResourceNotFoundException):
            await directory.get_template(template.id)
