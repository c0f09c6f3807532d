"""Tests for domain entities and enums."""

from datetime import UTC, datetime

import pytest

from app.domain.entities.task import RecurringConfig, TaskAssignee, TaskFeedback
from app.domain.entities.template import TaskTemplateEntity
from app.domain.entities.user import DepartmentEntity
from app.domain.enums import Permission, RecurringFrequency, TaskPriority, TaskStatus
from app.domain.exceptions import ValidationException
from tests.factories import make_task, make_user


class TestTaskEntity:
    def test_involves_raci_and_assignees(self) -> None:
        task = make_task(responsible="r", accountable="a", consulted="c", informed="i")
        assert all(task.involves(u) for u in ("r", "a", "c", "i"))
        assert not task.involves("x")
        seq = make_task(assignees=[TaskAssignee("s1", 1), TaskAssignee("s2", 1)])
        assert seq.involves("s2")
        assert seq.assignee_index("s2") == 1
        assert seq.assignee_index("x") == -1

    def test_requires_title(self) -> None:
        with pytest.raises(ValidationException):
            make_task(title=" ")

    def test_sequential_responsible_must_be_first_assignee(self) -> None:
        task = make_task(assignees=[TaskAssignee("s1", 1)])
        with pytest.raises(ValidationException) as exc_info:
            task.responsible = "other"
            task.validate()
        assert exc_info.value.details == {"field": "responsible"}

    def test_sequential_allocation_must_be_positive(self) -> None:
        with pytest.raises(ValidationException):
            make_task(assignees=[TaskAssignee("s1", 0)])


class TestValueParts:
    def test_feedback_rating_range(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=UTC)
        TaskFeedback("f", "u", 1, "", now)
        with pytest.raises(ValidationException):
            TaskFeedback("f", "u", 0, "", now)

    def test_recurring_config_validation(self) -> None:
        RecurringConfig(RecurringFrequency.WEEKLY, days_of_week=(0, 6))
        with pytest.raises(ValidationException):
            RecurringConfig(RecurringFrequency.DAILY, interval=0)
        with pytest.raises(ValidationException):
            RecurringConfig(RecurringFrequency.WEEKLY, days_of_week=(7,))

    def test_department_and_template_names_required(self) -> None:
        with pytest.raises(ValidationException):
            DepartmentEntity(id="d", name="")
        with pytest.raises(ValidationException):
            TaskTemplateEntity(
                id="t", name=" ", title="x", description="", dept="", priority=TaskPriority.LOW
            )


class TestUserPermissions:
    def test_admin_is_wildcard(self) -> None:
        admin = make_user(permissions={Permission.ADMIN.value})
        assert admin.has_permission(Permission.VIEW_REPORTS)
        assert admin.has_permission("anything")

    def test_any_permission(self) -> None:
        user = make_user(permissions={"create_tasks"})
        assert user.has_any_permission(Permission.VIEW_TASKS, Permission.CREATE_TASKS)
        assert not user.has_any_permission(Permission.VIEW_TASKS)


class TestEnums:
    def test_stored_values(self) -> None:
        assert TaskStatus.values() == ["To Do", "In Progress", "Done", "Overdue"]
        assert TaskPriority.values() == ["Low", "Medium", "High", "Urgent"]

    @pytest.mark.parametrize("raw", [None, "", "Archived"])
    def test_unknown_status_falls_back_to_todo(self, raw) -> None:
        assert TaskStatus.from_store(raw) == TaskStatus.TODO

    def test_unknown_priority_falls_back_to_medium(self) -> None:
        assert TaskPriority.from_store("Critical") == TaskPriority.MEDIUM
        assert TaskPriority.from_store("Urgent") == TaskPriority.URGENT
