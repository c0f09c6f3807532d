"""Task domain entity and its value parts (assignees, comments, feedback, attachments).

Represents a work item independent of persistence. Sequential tasks carry an
ordered list of TaskAssignee entries whose windows are computed by the
sequential scheduler.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import RecurringFrequency, TaskPriority, TaskStatus
from app.domain.exceptions import ValidationException


@dataclass
class TaskAssignee:
    """One ordered participant in a sequential task.

    start_time/end_time are set by the scheduler; is_completed is flipped by
    the completion toggle. Order is fixed at task creation.
    """

    user_id: str
    time_allocation: float
    is_completed: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TaskComment:
    id: str
    user_id: str
    content: str
    timestamp: datetime
    mentions: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskFeedback:
    id: str
    user_id: str
    rating: int
    comment: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if not 1 <= self.rating <= 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")


@dataclass(frozen=True)
class TaskAttachment:
    id: str
    name: str
    url: str
    content_type: str
    size: int
    uploaded_by: str
    uploaded_at: datetime


@dataclass(frozen=True)
class RecurringConfig:
    """Recurrence settings kept with the task; expansion into instances is not done here."""

    frequency: RecurringFrequency
    interval: int = 1
    end_date: datetime | None = None
    end_after_occurrences: int | None = None
    days_of_week: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.interval < 1:
            raise ValidationException("Recurring interval must be at least 1", field="interval")
        if any(d < 0 or d > 6 for d in self.days_of_week):
            raise ValidationException("Days of week must be 0-6", field="days_of_week")


@dataclass
class TaskEntity:
    """Domain entity for a task (RACI roles, department, priority, status, due).

    Validation runs on construction. For sequential tasks the responsible
    user is always the first assignee.
    """

    id: str
    title: str
    description: str
    responsible: str
    accountable: str
    dept: str
    priority: TaskPriority
    status: TaskStatus
    due: datetime
    created: datetime
    consulted: str | None = None
    informed: str | None = None
    is_sequential: bool = False
    assignees: list[TaskAssignee] = field(default_factory=list)
    checklist_items: list[str] = field(default_factory=list)
    comments: list[TaskComment] = field(default_factory=list)
    attachments: list[TaskAttachment] = field(default_factory=list)
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfig | None = None
    is_approved: bool = False
    approved_by: str | None = None
    approved_at: datetime | None = None
    feedback: TaskFeedback | None = None
    reminder_sent: bool = False
    tags: list[str] = field(default_factory=list)
    progress: int = 0
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate task business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Task ID is required", field="id")
        if not self.title or not self.title.strip():
            raise ValidationException("Task title is required", field="title")
        if self.is_sequential:
            if not self.assignees:
                raise ValidationException(
                    "Sequential task requires at least one assignee", field="assignees"
                )
            if self.responsible != self.assignees[0].user_id:
                raise ValidationException(
                    "Responsible user must be the first assignee of a sequential task",
                    field="responsible",
                )
            for assignee in self.assignees:
                if assignee.time_allocation <= 0:
                    raise ValidationException(
                        "Time allocation must be positive", field="time_allocation"
                    )

    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    def involves(self, user_id: str) -> bool:
        """Return whether the user holds a RACI role or an assignee slot on this task."""
        if user_id in (self.responsible, self.accountable, self.consulted, self.informed):
            return True
        return any(a.user_id == user_id for a in self.assignees)

    def assignee_index(self, user_id: str) -> int:
        """Return the position of user_id in the assignee list, or -1."""
        for i, assignee in enumerate(self.assignees):
            if assignee.user_id == user_id:
                return i
        return -1
