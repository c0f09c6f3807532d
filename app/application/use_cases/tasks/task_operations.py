"""Task operations: create, update, status/completion changes, comments, approval.

Every mutation loads the current task, derives the new state in memory (the
sequential scheduler does the sequencing math), writes the changed fields,
then sends the notifications the transition calls for. Writes are last-write-
wins; a failed notification after a successful write is logged, not retried.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from app.application.dtos.task import AssigneeInput, TaskCreate, TaskFilter, TaskPage
from app.application.interfaces.repositories import ITaskRepository, IUserRepository
from app.application.interfaces.services import IBlobStore
from app.application.services.authorization_service import AuthorizationService
from app.application.services.notification_service import NotificationService
from app.application.services.sequential_scheduler import (
    GateResult,
    apply_completion_toggle,
    calculate_sequential_deadlines,
    check_gate,
    default_due_for_priority,
    derive_task_status,
    get_current_assignee,
    newly_completed_index,
    sequential_progress,
)
from app.domain.entities.task import (
    TaskAssignee,
    TaskAttachment,
    TaskComment,
    TaskEntity,
    TaskFeedback,
)
from app.domain.entities.user import UserEntity
from app.domain.enums import Permission, TaskStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TaskBlockedException,
    ValidationException,
)
from app.shared.messages import translate
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_prefixed_id

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 2
MIN_DESCRIPTION_LENGTH = 5
MIN_TIME_ALLOCATION = 0.5

_MENTION_RE = re.compile(r"@([\w.-]+)")

# Attributes update_task accepts; everything else is owned by dedicated operations.
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "responsible",
        "accountable",
        "consulted",
        "informed",
        "dept",
        "priority",
        "status",
        "due",
        "assignees",
        "checklist_items",
        "drive_url",
        "is_recurring",
        "recurring_config",
        "tags",
    }
)


def _validate_text(title: str, description: str) -> None:
    if len(title.strip()) < MIN_TITLE_LENGTH:
        raise ValidationException(
            f"Title must be at least {MIN_TITLE_LENGTH} characters", field="title"
        )
    if len(description.strip()) < MIN_DESCRIPTION_LENGTH:
        raise ValidationException(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
            field="description",
        )


def _validate_assignees(assignees: Iterable[TaskAssignee | AssigneeInput]) -> None:
    seen: set[str] = set()
    for assignee in assignees:
        if assignee.time_allocation < MIN_TIME_ALLOCATION:
            raise ValidationException(
                f"Time allocation must be at least {MIN_TIME_ALLOCATION} hours",
                field="time_allocation",
            )
        if assignee.user_id in seen:
            raise ValidationException(
                f"User {assignee.user_id} appears twice in the assignee list",
                field="assignees",
            )
        seen.add(assignee.user_id)


def _validate_sequential_status(task: TaskEntity, status: TaskStatus) -> None:
    """Reject a status that contradicts assignee completion (Done iff all complete)."""
    all_done = bool(task.assignees) and all(a.is_completed for a in task.assignees)
    if (status == TaskStatus.DONE) != all_done:
        raise ValidationException(
            f"Status {status.value} does not match assignee completion; "
            "use the completion checkbox for sequential tasks",
            field="status",
        )


def _stamp_completion(before: TaskStatus, task: TaskEntity, now: datetime) -> TaskEntity:
    """Record when a task entered Done; clear it when it leaves."""
    if task.status == TaskStatus.DONE and before != TaskStatus.DONE:
        return replace(task, completed_at=now)
    if task.status != TaskStatus.DONE and task.completed_at is not None:
        return replace(task, completed_at=None)
    return task


def matches_filter(task: TaskEntity, filter_: TaskFilter) -> bool:
    """Return True if task satisfies every set field of filter_."""
    if filter_.status is not None and task.status != filter_.status:
        return False
    if filter_.priority is not None and task.priority != filter_.priority:
        return False
    if filter_.dept and task.dept != filter_.dept:
        return False
    if filter_.assignee:
        on_task = task.responsible == filter_.assignee or (
            task.is_sequential and task.assignee_index(filter_.assignee) >= 0
        )
        if not on_task:
            return False
    if filter_.due_from is not None and task.due < ensure_utc(filter_.due_from):
        return False
    if filter_.due_to is not None and task.due > ensure_utc(filter_.due_to):
        return False
    if filter_.search:
        needle = filter_.search.casefold()
        if needle not in task.title.casefold() and needle not in task.description.casefold():
            return False
    if filter_.tags and not filter_.tags.intersection(task.tags):
        return False
    return True


class TaskService:
    """Task lifecycle operations on behalf of an acting user."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        user_repo: IUserRepository,
        notification_service: NotificationService,
        authorization: AuthorizationService | None = None,
        blob_store: IBlobStore | None = None,
        page_size: int = 10,
    ) -> None:
        self.task_repo = task_repo
        self.user_repo = user_repo
        self.notifications = notification_service
        self.authorization = authorization or AuthorizationService()
        self.blob_store = blob_store
        self.page_size = page_size

    async def _load(self, task_id: str) -> TaskEntity:
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def _load_for_edit(self, actor: UserEntity, task_id: str) -> TaskEntity:
        task = await self._load(task_id)
        if not self.authorization.can_edit_task(actor, task):
            raise AuthorizationException(permission=Permission.UPDATE_TASKS.value)
        return task

    async def _safe_notify(self, coro: Any) -> None:
        """Await a notification write; the task write already succeeded, so only log failures."""
        try:
            await coro
        except Exception:
            logger.exception("Notification write failed")

    async def create_task(
        self, actor: UserEntity, data: TaskCreate, now: datetime | None = None
    ) -> TaskEntity:
        """Validate, schedule and persist a new task, then notify the responsible user.

        Raises:
            AuthorizationException: Actor lacks create_tasks/manage_tasks.
            ValidationException: Title/description too short, bad allocations,
                or a sequential task without assignees.
        """
        self.authorization.require_any(actor, Permission.CREATE_TASKS, Permission.MANAGE_TASKS)
        _validate_text(data.title, data.description)
        now = now or utc_now()
        due = ensure_utc(data.due) if data.due else default_due_for_priority(data.priority, now)

        assignees: list[TaskAssignee] = []
        responsible = data.responsible
        if data.is_sequential:
            if not data.assignees:
                raise ValidationException(
                    "Sequential task requires at least one assignee", field="assignees"
                )
            _validate_assignees(data.assignees)
            assignees = calculate_sequential_deadlines(
                due,
                [
                    TaskAssignee(user_id=a.user_id, time_allocation=a.time_allocation, notes=a.notes)
                    for a in data.assignees
                ],
            )
            responsible = assignees[0].user_id
        if not responsible:
            raise ValidationException("Responsible user is required", field="responsible")

        task = TaskEntity(
            id=generate_cuid(),
            title=data.title.strip(),
            description=data.description.strip(),
            responsible=responsible,
            accountable=data.accountable,
            consulted=data.consulted,
            informed=data.informed,
            dept=data.dept,
            priority=data.priority,
            status=TaskStatus.TODO,
            due=due,
            created=now,
            is_sequential=data.is_sequential,
            assignees=assignees,
            checklist_items=list(data.checklist_items),
            drive_url=data.drive_url,
            is_recurring=data.is_recurring,
            recurring_config=data.recurring_config,
            tags=list(data.tags),
        )
        created = await self.task_repo.create(task)
        logger.info("Task %s created by %s (sequential=%s)", created.id, actor.id, created.is_sequential)
        await self._safe_notify(self.notifications.notify_assignment(created))
        return created

    async def get_task(self, actor: UserEntity, task_id: str) -> TaskEntity:
        task = await self._load(task_id)
        if not self.authorization.can_view_task(actor, task):
            raise AuthorizationException(permission=Permission.VIEW_TASKS.value)
        return task

    async def list_tasks(
        self, actor: UserEntity, filter_: TaskFilter | None = None
    ) -> list[TaskEntity]:
        """Return visible tasks matching filter_, newest created first."""
        filter_ = filter_ or TaskFilter()
        tasks = await self.task_repo.list_tasks(
            dept=filter_.dept or None,
            status=filter_.status.value if filter_.status else None,
        )
        visible = self.authorization.visible_tasks(actor, tasks)
        return [t for t in visible if matches_filter(t, filter_)]

    async def list_tasks_page(
        self,
        actor: UserEntity,
        page_size: int | None = None,
        cursor: str | None = None,
    ) -> TaskPage:
        """Return one page ordered by created desc; pass next_cursor to continue."""
        self.authorization.require_any(actor, Permission.VIEW_TASKS, Permission.MANAGE_TASKS)
        size = page_size or self.page_size
        if size < 1:
            raise ValidationException("Page size must be positive", field="page_size")
        items, has_more = await self.task_repo.list_page(size, cursor)
        return TaskPage(
            items=items,
            has_more=has_more,
            next_cursor=items[-1].id if has_more and items else None,
        )

    async def update_task(
        self,
        actor: UserEntity,
        task_id: str,
        changes: dict[str, Any],
        now: datetime | None = None,
    ) -> TaskEntity:
        """Apply a partial update and send the notifications the change implies.

        Sequential tasks keep responsible == first assignee, have their windows
        recomputed when due or the assignee list changes, and re-derive status
        from assignee completion. An explicit status on a sequential task must
        agree with completion: Done exactly when every step is complete.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )
        before = await self._load_for_edit(actor, task_id)
        now = now or utc_now()
        if "title" in changes or "description" in changes:
            _validate_text(
                changes.get("title", before.title), changes.get("description", before.description)
            )
        if "due" in changes and changes["due"] is not None:
            changes = {**changes, "due": ensure_utc(changes["due"])}

        if before.is_sequential and changes.get("assignees"):
            changes = {**changes, "responsible": changes["assignees"][0].user_id}
        fields = set(changes)
        after = replace(before, **changes)
        if after.is_sequential and ("assignees" in changes or "due" in changes):
            _validate_assignees(after.assignees)
            after = self._reschedule(before, after)
            after = replace(
                after,
                responsible=after.assignees[0].user_id,
                status=after.status if "status" in changes else derive_task_status(after),
                progress=sequential_progress(after),
            )
            fields |= {"assignees", "responsible", "status", "progress"}
        if after.is_sequential and "status" in changes:
            _validate_sequential_status(after, after.status)
        after = _stamp_completion(before.status, after, now)
        fields.add("completed_at")

        await self.task_repo.update(after, fields)
        logger.info("Task %s updated by %s: %s", task_id, actor.id, sorted(fields))
        await self._notify_transition(before, after)
        return after

    def _reschedule(self, before: TaskEntity, after: TaskEntity) -> TaskEntity:
        """Recompute windows when due or the slot plan changed; keep completion flags."""
        plan_before = [(a.user_id, a.time_allocation) for a in before.assignees]
        plan_after = [(a.user_id, a.time_allocation) for a in after.assignees]
        if plan_before == plan_after and before.due == after.due:
            return after
        scheduled = calculate_sequential_deadlines(after.due, after.assignees)
        merged = [
            replace(s, end_time=a.end_time) if a.is_completed and a.end_time else s
            for s, a in zip(scheduled, after.assignees)
        ]
        return replace(after, assignees=merged)

    async def _notify_transition(self, before: TaskEntity, after: TaskEntity) -> None:
        if before.status != TaskStatus.DONE and after.status == TaskStatus.DONE:
            await self._safe_notify(self.notifications.notify_approval_request(after))
        index = newly_completed_index(before, after)
        if index is not None and index + 1 < len(after.assignees):
            next_user = after.assignees[index + 1].user_id
            await self._safe_notify(self.notifications.notify_next_assignee(after, next_user))

    async def _ensure_not_blocked(self, task: TaskEntity, actor: UserEntity) -> GateResult:
        """Raise TaskBlockedException when actor waits on a predecessor of a sequential task."""
        if not task.is_sequential:
            return check_gate(task, actor.id)
        gate = check_gate(
            task,
            actor.id,
            await self.user_repo.list_users(),
            translate("gate.unknown_predecessor"),
        )
        if gate.is_blocked:
            raise TaskBlockedException(task.id, actor.id, gate.blocked_by_name)
        return gate

    async def gate_status(
        self, actor: UserEntity, task_id: str, user_id: str | None = None
    ) -> GateResult:
        """Return the sequential gate of user_id (default: actor) on a visible task."""
        task = await self.get_task(actor, task_id)
        users = await self.user_repo.list_users() if task.is_sequential else ()
        return check_gate(
            task, user_id or actor.id, users, translate("gate.unknown_predecessor")
        )

    async def change_status(
        self,
        actor: UserEntity,
        task_id: str,
        status: TaskStatus,
        now: datetime | None = None,
    ) -> TaskEntity:
        """Set status directly (Kanban move).

        Raises:
            TaskBlockedException: Actor is a sequential assignee still waiting on
                a predecessor.
            ValidationException: Sequential task moved to Done with steps open,
                or out of Done with every step complete.
        """
        task = await self._load_for_edit(actor, task_id)
        await self._ensure_not_blocked(task, actor)
        if task.status == status:
            return task
        if task.is_sequential:
            _validate_sequential_status(task, status)
        updated = _stamp_completion(task.status, replace(task, status=status), now or utc_now())
        await self.task_repo.update(updated, {"status", "completed_at"})
        await self._notify_transition(task, updated)
        return updated

    async def toggle_completion(
        self,
        actor: UserEntity,
        task_id: str,
        checked: bool,
        now: datetime | None = None,
    ) -> TaskEntity:
        """Check or uncheck completion (the My Tasks checkbox).

        For sequential tasks, assignees must be unblocked and checking completes
        the current step, which must be the actor's own unless they manage tasks.
        """
        task = await self._load_for_edit(actor, task_id)
        now = now or utc_now()
        if task.is_sequential:
            await self._ensure_not_blocked(task, actor)
            current = get_current_assignee(task)
            if (
                checked
                and current is not None
                and current != actor.id
                and not actor.has_permission(Permission.MANAGE_TASKS)
            ):
                raise ValidationException(
                    "Only the current assignee can complete this step", field="assignees"
                )

        change = apply_completion_toggle(task, checked, now)
        updated = _stamp_completion(task.status, change.task, now)
        await self.task_repo.update(
            updated, {"assignees", "status", "progress", "completed_at"}
        )
        logger.info(
            "Task %s completion %s by %s -> %s",
            task_id,
            "checked" if checked else "unchecked",
            actor.id,
            updated.status.value,
        )
        if change.became_done:
            await self._safe_notify(self.notifications.notify_approval_request(updated))
        if change.next_assignee_id:
            await self._safe_notify(
                self.notifications.notify_next_assignee(updated, change.next_assignee_id)
            )
        return updated

    async def add_comment(
        self,
        actor: UserEntity,
        task_id: str,
        content: str,
        now: datetime | None = None,
    ) -> TaskComment:
        """Append a comment; users mentioned as @user_id get a mention notification."""
        if not content or not content.strip():
            raise ValidationException("Comment cannot be empty", field="content")
        task = await self.get_task(actor, task_id)
        mentioned: list[str] = []
        for user_id in dict.fromkeys(_MENTION_RE.findall(content)):
            if user_id != actor.id and await self.user_repo.get_by_id(user_id) is not None:
                mentioned.append(user_id)
        comment = TaskComment(
            id=generate_prefixed_id("comment"),
            user_id=actor.id,
            content=content.strip(),
            timestamp=now or utc_now(),
            mentions=tuple(mentioned),
        )
        updated = replace(task, comments=[*task.comments, comment])
        await self.task_repo.update(updated, {"comments"})
        for user_id in mentioned:
            await self._safe_notify(self.notifications.notify_mention(updated, user_id, actor.name))
        return comment

    async def approve_task(
        self, actor: UserEntity, task_id: str, now: datetime | None = None
    ) -> TaskEntity:
        """Approve a Done task and notify the responsible user.

        Raises:
            AuthorizationException: Actor lacks approve_tasks.
            ValidationException: Task is not Done.
        """
        self.authorization.require_permission(actor, Permission.APPROVE_TASKS)
        task = await self._load(task_id)
        if task.status != TaskStatus.DONE:
            raise ValidationException("Only completed tasks can be approved", field="status")
        if task.is_approved:
            return task
        updated = replace(task, is_approved=True, approved_by=actor.id, approved_at=now or utc_now())
        await self.task_repo.update(updated, {"is_approved", "approved_by", "approved_at"})
        await self._safe_notify(self.notifications.notify_approved(updated, actor.name))
        return updated

    async def submit_feedback(
        self,
        actor: UserEntity,
        task_id: str,
        rating: int,
        comment: str = "",
        now: datetime | None = None,
    ) -> TaskEntity:
        """Attach a 1-5 rating to the task (replacing earlier feedback) and notify responsible."""
        task = await self.get_task(actor, task_id)
        feedback = TaskFeedback(
            id=generate_prefixed_id("feedback"),
            user_id=actor.id,
            rating=rating,
            comment=comment.strip(),
            timestamp=now or utc_now(),
        )
        updated = replace(task, feedback=feedback)
        await self.task_repo.update(updated, {"feedback"})
        if task.responsible != actor.id:
            await self._safe_notify(self.notifications.notify_feedback(updated, actor.name, rating))
        return updated

    async def delete_task(self, actor: UserEntity, task_id: str) -> None:
        """Delete a task and its attachments. Requires manage_tasks."""
        self.authorization.require_permission(actor, Permission.MANAGE_TASKS)
        task = await self._load(task_id)
        if self.blob_store is not None:
            for attachment in task.attachments:
                await self.blob_store.delete(self._attachment_path(task.id, attachment))
        await self.task_repo.delete(task_id)
        logger.info("Task %s deleted by %s", task_id, actor.id)

    @staticmethod
    def _attachment_path(task_id: str, attachment: TaskAttachment) -> str:
        return f"tasks/{task_id}/{attachment.id}-{attachment.name}"

    async def add_attachment(
        self,
        actor: UserEntity,
        task_id: str,
        filename: str,
        content: bytes,
        content_type: str,
        now: datetime | None = None,
    ) -> TaskAttachment:
        """Upload content to the blob store and record it on the task."""
        if self.blob_store is None:
            raise ValidationException("Attachments are not configured", field="file")
        if not filename:
            raise ValidationException("File name is required", field="file")
        task = await self._load_for_edit(actor, task_id)
        attachment = TaskAttachment(
            id=generate_prefixed_id("attachment"),
            name=filename,
            url="",
            content_type=content_type or "application/octet-stream",
            size=len(content),
            uploaded_by=actor.id,
            uploaded_at=now or utc_now(),
        )
        url = await self.blob_store.upload(
            self._attachment_path(task_id, attachment), content, attachment.content_type
        )
        attachment = replace(attachment, url=url)
        updated = replace(task, attachments=[*task.attachments, attachment])
        await self.task_repo.update(updated, {"attachments"})
        return attachment

    async def remove_attachment(
        self, actor: UserEntity, task_id: str, attachment_id: str
    ) -> TaskEntity:
        task = await self._load_for_edit(actor, task_id)
        attachment = next((a for a in task.attachments if a.id == attachment_id), None)
        if attachment is None:
            raise ResourceNotFoundException("attachment", attachment_id)
        if self.blob_store is not None:
            await self.blob_store.delete(self._attachment_path(task_id, attachment))
        updated = replace(
            task, attachments=[a for a in task.attachments if a.id != attachment_id]
        )
        await self.task_repo.update(updated, {"attachments"})
        return updated
