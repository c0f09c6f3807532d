"""Task API schemas: create/update payloads, actions, and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.task import AssigneeInput, TaskCreate
from app.domain.entities.task import RecurringConfig, TaskAssignee
from app.domain.enums import GateState, RecurringFrequency, TaskPriority, TaskStatus


class AssigneeIn(BaseModel):
    """One ordered slot of a sequential task."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., min_length=1)
    time_allocation: float = Field(..., gt=0, description="Hours allotted to this step")
    notes: str | None = None


class RecurringConfigSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    frequency: RecurringFrequency
    interval: int = Field(default=1, ge=1)
    end_date: datetime | None = None
    end_after_occurrences: int | None = Field(default=None, ge=1)
    days_of_week: list[int] = []

    def to_entity(self) -> RecurringConfig:
        return RecurringConfig(
            frequency=self.frequency,
            interval=self.interval,
            end_date=self.end_date,
            end_after_occurrences=self.end_after_occurrences,
            days_of_week=tuple(self.days_of_week),
        )


class TaskCreateRequest(BaseModel):
    """Body of POST /tasks. For sequential tasks responsible is taken from assignees[0]."""

    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=5000)
    responsible: str = ""
    accountable: str = Field(..., min_length=1)
    dept: str = Field(..., min_length=1)
    priority: TaskPriority = TaskPriority.MEDIUM
    due: datetime | None = None
    consulted: str | None = None
    informed: str | None = None
    is_sequential: bool = False
    assignees: list[AssigneeIn] = []
    checklist_items: list[str] = []
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] = []

    def to_command(self) -> TaskCreate:
        return TaskCreate(
            title=self.title,
            description=self.description,
            responsible=self.responsible,
            accountable=self.accountable,
            dept=self.dept,
            priority=self.priority,
            due=self.due,
            consulted=self.consulted or None,
            informed=self.informed or None,
            is_sequential=self.is_sequential,
            assignees=tuple(
                AssigneeInput(a.user_id, a.time_allocation, a.notes) for a in self.assignees
            ),
            checklist_items=tuple(self.checklist_items),
            drive_url=self.drive_url,
            is_recurring=self.is_recurring,
            recurring_config=self.recurring_config.to_entity() if self.recurring_config else None,
            tags=tuple(self.tags),
        )


class TaskUpdateRequest(BaseModel):
    """Body of PATCH /tasks/{id}; only fields present in the request are changed."""

    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    responsible: str | None = None
    accountable: str | None = None
    consulted: str | None = None
    informed: str | None = None
    dept: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due: datetime | None = None
    assignees: list[AssigneeIn] | None = None
    checklist_items: list[str] | None = None
    drive_url: str | None = None
    is_recurring: bool | None = None
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] | None = None

    def to_changes(self) -> dict[str, Any]:
        """Return entity-level changes for TaskService.update_task."""
        changes: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "assignees" and value is not None:
                value = [
                    TaskAssignee(user_id=a.user_id, time_allocation=a.time_allocation, notes=a.notes)
                    for a in value
                ]
            elif name == "recurring_config" and value is not None:
                value = value.to_entity()
            changes[name] = value
        return changes


class StatusChangeRequest(BaseModel):
    status: TaskStatus


class CompletionToggleRequest(BaseModel):
    checked: bool


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class FeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)


class AssigneeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    time_allocation: float
    is_completed: bool
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    content: str
    timestamp: datetime
    mentions: list[str] = []


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    rating: int
    comment: str
    timestamp: datetime


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    content_type: str
    size: int
    uploaded_by: str
    uploaded_at: datetime


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    responsible: str
    accountable: str
    consulted: str | None = None
    informed: str | None = None
    dept: str
    priority: TaskPriority
    status: TaskStatus
    due: datetime
    created: datetime
    is_sequential: bool
    assignees: list[AssigneeResponse] = []
    checklist_items: list[str] = []
    comments: list[CommentResponse] = []
    attachments: list[AttachmentResponse] = []
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfigSchema | None = None
    is_approved: bool = False
    approved_by: str | None = None
    approved_at: datetime | None = None
    feedback: FeedbackResponse | None = None
    reminder_sent: bool = False
    tags: list[str] = []
    progress: int = 0
    completed_at: datetime | None = None


class TaskPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: list[TaskResponse]
    has_more: bool
    next_cursor: str | None = None


class GateResponse(BaseModel):
    """Sequential gate of one user on one task."""

    model_config = ConfigDict(from_attributes=True)

    state: GateState
    index: int
    is_blocked: bool
    can_start: bool
    blocked_by_user_id: str | None = None
    blocked_by_name: str | None = None


class TaskDraftResponse(BaseModel):
    """Pre-filled task form produced from a template (not persisted)."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    responsible: str
    accountable: str
    dept: str
    priority: TaskPriority
    is_sequential: bool
    assignees: list[AssigneeIn] = []
    checklist_items: list[str] = []
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] = []
