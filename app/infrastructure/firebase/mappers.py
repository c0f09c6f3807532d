"""Document <-> entity mapping for the Firestore collections.

Documents use the camelCase field names the web client writes. Task
timestamps (due, created, assignee windows) are stored as ISO-8601 strings
with a Z suffix, which sort correctly as strings, so range queries on 'due'
work on them directly. Readers accept either strings or native timestamps.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from app.domain.entities.notification import NotificationEntity
from app.domain.entities.task import (
    RecurringConfig,
    TaskAssignee,
    TaskAttachment,
    TaskComment,
    TaskEntity,
    TaskFeedback,
)
from app.domain.entities.template import TaskTemplateEntity, TemplateAssignee
from app.domain.entities.user import Badge, DepartmentEntity, UserEntity
from app.domain.enums import (
    BadgeCriteria,
    NotificationPriority,
    NotificationType,
    RecurringFrequency,
    TaskPriority,
    TaskStatus,
    UserStatus,
)
from app.shared.utils.datetime import parse_iso_utc, to_iso_z

# Entity attribute -> document field
TASK_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "responsible": "responsible",
    "accountable": "accountable",
    "consulted": "consulted",
    "informed": "informed",
    "dept": "dept",
    "priority": "priority",
    "status": "status",
    "due": "due",
    "created": "created",
    "is_sequential": "isSequential",
    "assignees": "assignees",
    "checklist_items": "checklistItems",
    "comments": "comments",
    "attachments": "attachments",
    "drive_url": "driveUrl",
    "is_recurring": "isRecurring",
    "recurring_config": "recurringConfig",
    "is_approved": "isApproved",
    "approved_by": "approvedBy",
    "approved_at": "approvedAt",
    "feedback": "feedback",
    "reminder_sent": "reminderSent",
    "tags": "tags",
    "progress": "progress",
    "completed_at": "completedAt",
}

USER_FIELDS: dict[str, str] = {
    "name": "name",
    "email": "email",
    "role": "role",
    "dept": "dept",
    "permissions": "permissions",
    "status": "status",
    "avatar": "avatar",
    "badges": "badges",
    "last_login": "lastLogin",
}

DEPARTMENT_FIELDS: dict[str, str] = {
    "name": "name",
    "description": "description",
    "manager_id": "managerId",
    "color": "color",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

NOTIFICATION_FIELDS: dict[str, str] = {
    "user_id": "userId",
    "title": "title",
    "message": "message",
    "type": "type",
    "created_at": "createdAt",
    "task_id": "taskId",
    "is_read": "isRead",
    "read_at": "readAt",
    "priority": "priority",
    "action_url": "actionUrl",
}

TEMPLATE_FIELDS: dict[str, str] = {
    "name": "name",
    "title": "title",
    "description": "description",
    "dept": "dept",
    "priority": "priority",
    "checklist_items": "checklistItems",
    "is_sequential": "isSequential",
    "default_assignees": "defaultAssignees",
    "drive_url": "driveUrl",
    "is_recurring": "isRecurring",
    "recurring_config": "recurringConfig",
    "tags": "tags",
    "created_by": "createdBy",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def select_fields(
    doc: dict[str, Any], mapping: dict[str, str], fields: Collection[str]
) -> dict[str, Any]:
    """Pick the document fields for the named entity attributes.

    Raises:
        KeyError: If an attribute has no document field.
    """
    return {mapping[name]: doc[mapping[name]] for name in fields}


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


# ---- Tasks ----


def _recurring_to_doc(config: RecurringConfig | None) -> dict | None:
    if config is None:
        return None
    return {
        "frequency": config.frequency.value,
        "interval": config.interval,
        "endDate": to_iso_z(config.end_date),
        "endAfterOccurrences": config.end_after_occurrences,
        "daysOfWeek": list(config.days_of_week),
    }


def _recurring_from_doc(data: dict | None) -> RecurringConfig | None:
    if not data or not data.get("frequency"):
        return None
    return RecurringConfig(
        frequency=RecurringFrequency(data["frequency"]),
        interval=int(data.get("interval") or 1),
        end_date=parse_iso_utc(data.get("endDate")),
        end_after_occurrences=data.get("endAfterOccurrences"),
        days_of_week=tuple(data.get("daysOfWeek") or ()),
    )


def task_to_doc(task: TaskEntity) -> dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "responsible": task.responsible,
        "accountable": task.accountable,
        "consulted": task.consulted,
        "informed": task.informed,
        "dept": task.dept,
        "priority": task.priority.value,
        "status": task.status.value,
        "due": to_iso_z(task.due),
        "created": to_iso_z(task.created),
        "isSequential": task.is_sequential,
        "assignees": [
            {
                "userId": a.user_id,
                "timeAllocation": float(a.time_allocation),
                "isCompleted": a.is_completed,
                "startTime": to_iso_z(a.start_time),
                "endTime": to_iso_z(a.end_time),
                "notes": a.notes,
            }
            for a in task.assignees
        ],
        "checklistItems": list(task.checklist_items),
        "comments": [
            {
                "id": c.id,
                "userId": c.user_id,
                "content": c.content,
                "timestamp": to_iso_z(c.timestamp),
                "mentions": list(c.mentions),
            }
            for c in task.comments
        ],
        "attachments": [
            {
                "id": a.id,
                "name": a.name,
                "url": a.url,
                "type": a.content_type,
                "size": a.size,
                "uploadedBy": a.uploaded_by,
                "uploadedAt": to_iso_z(a.uploaded_at),
            }
            for a in task.attachments
        ],
        "driveUrl": task.drive_url,
        "isRecurring": task.is_recurring,
        "recurringConfig": _recurring_to_doc(task.recurring_config),
        "isApproved": task.is_approved,
        "approvedBy": task.approved_by,
        "approvedAt": to_iso_z(task.approved_at),
        "feedback": (
            {
                "id": task.feedback.id,
                "userId": task.feedback.user_id,
                "rating": task.feedback.rating,
                "comment": task.feedback.comment,
                "timestamp": to_iso_z(task.feedback.timestamp),
            }
            if task.feedback
            else None
        ),
        "reminderSent": task.reminder_sent,
        "tags": list(task.tags),
        "progress": task.progress,
        "completedAt": to_iso_z(task.completed_at),
    }


def task_from_doc(doc_id: str, data: dict[str, Any]) -> TaskEntity:
    feedback = data.get("feedback")
    return TaskEntity(
        id=doc_id,
        title=data.get("title", ""),
        description=data.get("description", ""),
        responsible=data.get("responsible", ""),
        accountable=data.get("accountable", ""),
        consulted=data.get("consulted") or None,
        informed=data.get("informed") or None,
        dept=data.get("dept", ""),
        priority=TaskPriority.from_store(data.get("priority")),
        status=TaskStatus.from_store(data.get("status")),
        due=parse_iso_utc(data.get("due")),
        created=parse_iso_utc(data.get("created")),
        is_sequential=bool(data.get("isSequential", False)),
        assignees=[
            TaskAssignee(
                user_id=a.get("userId", ""),
                time_allocation=float(a.get("timeAllocation") or 0),
                is_completed=bool(a.get("isCompleted", False)),
                start_time=parse_iso_utc(a.get("startTime")),
                end_time=parse_iso_utc(a.get("endTime")),
                notes=a.get("notes"),
            )
            for a in data.get("assignees") or []
        ],
        checklist_items=list(data.get("checklistItems") or []),
        comments=[
            TaskComment(
                id=c.get("id", ""),
                user_id=c.get("userId", ""),
                content=c.get("content", ""),
                timestamp=parse_iso_utc(c.get("timestamp")),
                mentions=tuple(c.get("mentions") or ()),
            )
            for c in data.get("comments") or []
        ],
        attachments=[
            TaskAttachment(
                id=a.get("id", ""),
                name=a.get("name", ""),
                url=a.get("url", ""),
                content_type=a.get("type", "application/octet-stream"),
                size=int(a.get("size") or 0),
                uploaded_by=a.get("uploadedBy", ""),
                uploaded_at=parse_iso_utc(a.get("uploadedAt")),
            )
            for a in data.get("attachments") or []
        ],
        drive_url=data.get("driveUrl") or None,
        is_recurring=bool(data.get("isRecurring", False)),
        recurring_config=_recurring_from_doc(data.get("recurringConfig")),
        is_approved=bool(data.get("isApproved", False)),
        approved_by=data.get("approvedBy"),
        approved_at=parse_iso_utc(data.get("approvedAt")),
        feedback=(
            TaskFeedback(
                id=feedback.get("id", ""),
                user_id=feedback.get("userId", ""),
                rating=int(feedback.get("rating") or 0),
                comment=feedback.get("comment", ""),
                timestamp=parse_iso_utc(feedback.get("timestamp")),
            )
            if feedback
            else None
        ),
        reminder_sent=bool(data.get("reminderSent", False)),
        tags=list(data.get("tags") or []),
        progress=int(data.get("progress") or 0),
        completed_at=parse_iso_utc(data.get("completedAt")),
    )


# ---- Users and departments ----


def user_to_doc(user: UserEntity) -> dict[str, Any]:
    return {
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "dept": user.dept,
        "permissions": sorted(user.permissions),
        "status": user.status.value,
        "avatar": user.avatar,
        "badges": [
            {
                "id": b.id,
                "name": b.name,
                "description": b.description,
                "icon": b.icon,
                "color": b.color,
                "criteria": {"type": b.criteria_type.value, "threshold": b.threshold},
                "createdAt": to_iso_z(b.created_at),
            }
            for b in user.badges
        ],
        "lastLogin": user.last_login,
    }


def _badge_from_doc(data: dict[str, Any]) -> Badge:
    criteria = data.get("criteria") or {}
    return Badge(
        id=data.get("id", ""),
        name=data.get("name", ""),
        description=data.get("description", ""),
        icon=data.get("icon", "award"),
        color=data.get("color", "orange"),
        criteria_type=BadgeCriteria(criteria.get("type", BadgeCriteria.CUSTOM.value)),
        threshold=int(criteria.get("threshold") or 0),
        created_at=parse_iso_utc(data.get("createdAt")),
    )


def user_from_doc(doc_id: str, data: dict[str, Any]) -> UserEntity:
    return UserEntity(
        id=doc_id,
        name=data.get("name", ""),
        email=data.get("email", ""),
        role=data.get("role", ""),
        dept=data.get("dept", ""),
        permissions=set(data.get("permissions") or []),
        status=UserStatus(data.get("status") or UserStatus.ACTIVE.value),
        avatar=data.get("avatar"),
        badges=[_badge_from_doc(b) for b in data.get("badges") or []],
        last_login=parse_iso_utc(data.get("lastLogin")),
    )


def department_to_doc(department: DepartmentEntity) -> dict[str, Any]:
    return {
        "name": department.name,
        "description": department.description,
        "managerId": department.manager_id,
        "color": department.color,
        "createdAt": department.created_at,
        "updatedAt": department.updated_at,
    }


def department_from_doc(doc_id: str, data: dict[str, Any]) -> DepartmentEntity:
    return DepartmentEntity(
        id=doc_id,
        name=data.get("name", ""),
        description=data.get("description"),
        manager_id=data.get("managerId"),
        color=data.get("color"),
        created_at=parse_iso_utc(data.get("createdAt")),
        updated_at=parse_iso_utc(data.get("updatedAt")),
    )


# ---- Notifications ----


def notification_to_doc(notification: NotificationEntity) -> dict[str, Any]:
    return {
        "userId": notification.user_id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type.value,
        "createdAt": notification.created_at,
        "taskId": notification.task_id,
        "isRead": notification.is_read,
        "readAt": notification.read_at,
        "priority": _enum_value(notification.priority),
        "actionUrl": notification.action_url,
    }


def notification_from_doc(doc_id: str, data: dict[str, Any]) -> NotificationEntity:
    priority = data.get("priority")
    return NotificationEntity(
        id=doc_id,
        user_id=data.get("userId", ""),
        title=data.get("title", ""),
        message=data.get("message", ""),
        type=NotificationType(data.get("type") or NotificationType.SYSTEM.value),
        created_at=parse_iso_utc(data.get("createdAt")),
        task_id=data.get("taskId"),
        is_read=bool(data.get("isRead", False)),
        read_at=parse_iso_utc(data.get("readAt")),
        priority=NotificationPriority(priority) if priority else None,
        action_url=data.get("actionUrl"),
    )


# ---- Templates ----


def template_to_doc(template: TaskTemplateEntity) -> dict[str, Any]:
    return {
        "name": template.name,
        "title": template.title,
        "description": template.description,
        "dept": template.dept,
        "priority": template.priority.value,
        "checklistItems": list(template.checklist_items),
        "isSequential": template.is_sequential,
        "defaultAssignees": [
            {"role": a.role, "timeAllocation": float(a.time_allocation)}
            for a in template.default_assignees
        ],
        "driveUrl": template.drive_url,
        "isRecurring": template.is_recurring,
        "recurringConfig": _recurring_to_doc(template.recurring_config),
        "tags": list(template.tags),
        "createdBy": template.created_by,
        "createdAt": template.created_at,
        "updatedAt": template.updated_at,
    }


def template_from_doc(doc_id: str, data: dict[str, Any]) -> TaskTemplateEntity:
    return TaskTemplateEntity(
        id=doc_id,
        name=data.get("name", ""),
        title=data.get("title", ""),
        description=data.get("description", ""),
        dept=data.get("dept", ""),
        priority=TaskPriority.from_store(data.get("priority")),
        checklist_items=list(data.get("checklistItems") or []),
        is_sequential=bool(data.get("isSequential", False)),
        default_assignees=[
            TemplateAssignee(role=a.get("role", ""), time_allocation=float(a.get("timeAllocation") or 0))
            for a in data.get("defaultAssignees") or []
        ],
        drive_url=data.get("driveUrl"),
        is_recurring=bool(data.get("isRecurring", False)),
        recurring_config=_recurring_from_doc(data.get("recurringConfig")),
        tags=list(data.get("tags") or []),
        created_by=data.get("createdBy"),
        created_at=parse_iso_utc(data.get("createdAt")),
        updated_at=parse_iso_utc(data.get("updatedAt")),
    )
