"""Task template API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.template import TaskTemplateEntity, TemplateAssignee
from app.domain.enums import TaskPriority
from app.schemas.task import RecurringConfigSchema


class TemplateAssigneeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role: str = Field(..., min_length=1)
    time_allocation: float = Field(..., gt=0)


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., max_length=200)
    description: str = Field(default="", max_length=5000)
    dept: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    checklist_items: list[str] = []
    is_sequential: bool = False
    default_assignees: list[TemplateAssigneeSchema] = []
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] = []

    def to_entity(self) -> TaskTemplateEntity:
        return TaskTemplateEntity(
            id="",
            name=self.name,
            title=self.title,
            description=self.description,
            dept=self.dept,
            priority=self.priority,
            checklist_items=list(self.checklist_items),
            is_sequential=self.is_sequential,
            default_assignees=[
                TemplateAssignee(a.role, a.time_allocation) for a in self.default_assignees
            ],
            drive_url=self.drive_url,
            is_recurring=self.is_recurring,
            recurring_config=self.recurring_config.to_entity() if self.recurring_config else None,
            tags=list(self.tags),
        )


class TemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    dept: str | None = None
    priority: TaskPriority | None = None
    checklist_items: list[str] | None = None
    is_sequential: bool | None = None
    default_assignees: list[TemplateAssigneeSchema] | None = None
    drive_url: str | None = None
    is_recurring: bool | None = None
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] | None = None

    def to_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "default_assignees" and value is not None:
                value = [TemplateAssignee(a.role, a.time_allocation) for a in value]
            elif name == "recurring_config" and value is not None:
                value = value.to_entity()
            changes[name] = value
        return changes


class TemplateApplyRequest(BaseModel):
    responsible: str = ""
    accountable: str = ""


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    description: str
    dept: str
    priority: TaskPriority
    checklist_items: list[str] = []
    is_sequential: bool
    default_assignees: list[TemplateAssigneeSchema] = []
    drive_url: str | None = None
    is_recurring: bool = False
    recurring_config: RecurringConfigSchema | None = None
    tags: list[str] = []
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
