"""Task template entity: reusable presets for the task form."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.task import RecurringConfig
from app.domain.enums import TaskPriority
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class TemplateAssignee:
    """Default sequential slot, resolved to a concrete user by role when applied."""

    role: str
    time_allocation: float


@dataclass
class TaskTemplateEntity:
    id: str
    name: str
    title: str
    description: str
    dept: str
    priority: TaskPriority
    checklist_items: list[str] = field(default_factory=list)
    is_sequential: bool = False
    default_assignees: list[TemplateAssignee] = field(default_factory=list)
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfig | None = None
    tags: list[str] = field(default_factory=list)
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationException("Template name is required", field="name")
