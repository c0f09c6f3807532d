"""DTOs for task use cases (commands, filters, pages)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.task import RecurringConfig, TaskEntity
from app.domain.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class AssigneeInput:
    """Ordered sequential slot as entered on the task form."""

    user_id: str
    time_allocation: float
    notes: str | None = None


@dataclass(frozen=True)
class TaskCreate:
    """Input for TaskService.create_task.

    due may be omitted; the priority's default lead time is used. For
    sequential tasks responsible is ignored and taken from assignees[0].
    """

    title: str
    description: str
    responsible: str
    accountable: str
    dept: str
    priority: TaskPriority = TaskPriority.MEDIUM
    due: datetime | None = None
    consulted: str | None = None
    informed: str | None = None
    is_sequential: bool = False
    assignees: tuple[AssigneeInput, ...] = ()
    checklist_items: tuple[str, ...] = ()
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfig | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskFilter:
    """Client-side style filter over a task list. None/empty fields match everything."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    dept: str | None = None
    assignee: str | None = None
    due_from: datetime | None = None
    due_to: datetime | None = None
    search: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class TaskPage:
    """One page of tasks ordered by created (newest first)."""

    items: list[TaskEntity]
    has_more: bool
    next_cursor: str | None = None
