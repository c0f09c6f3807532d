"""Sequential task scheduling: deadline windows, gating, and status derivation.

A sequential task splits its work across an ordered list of assignees. Each
assignee gets a [start_time, end_time] window chained backwards from the
task's due time, and may only start once every predecessor has completed.

All functions here are pure with respect to their inputs: they never touch the
backing store and return new objects instead of mutating the task they are
given. Callers persist the result.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.domain.entities.task import TaskAssignee, TaskEntity
from app.domain.entities.user import UserEntity
from app.domain.enums import GateState, TaskPriority, TaskStatus
from app.domain.exceptions import EmptyAssigneeListException, ValidationException
from app.shared.utils.datetime import ensure_utc

# Shown when the blocking predecessor's profile cannot be resolved.
UNKNOWN_PREDECESSOR_NAME = "Previous assignee"

# Default deadline offset by priority when the creator does not pick a due time.
PRIORITY_DEADLINE_HOURS: dict[TaskPriority, int] = {
    TaskPriority.URGENT: 4,
    TaskPriority.HIGH: 12,
    TaskPriority.MEDIUM: 24,
    TaskPriority.LOW: 72,
}


@dataclass(frozen=True)
class BlockStatus:
    """Legacy two-field view of a gating check."""

    blocked: bool
    blocked_by: str | None = None


@dataclass(frozen=True)
class GateResult:
    """Result of checking whether user_id may work on a sequential task.

    blocked_by_* identify the lowest-index incomplete predecessor when state
    is BLOCKED; index is the user's position in the assignee list (-1 if absent).
    """

    state: GateState
    index: int = -1
    blocked_by_user_id: str | None = None
    blocked_by_name: str | None = None

    @property
    def is_blocked(self) -> bool:
        return self.state == GateState.BLOCKED

    @property
    def can_start(self) -> bool:
        return self.state in (GateState.UNBLOCKED, GateState.NOT_APPLICABLE)


@dataclass(frozen=True)
class CompletionChange:
    """Outcome of toggling completion on a task.

    changed_index is the assignee position whose flag flipped (None for
    regular tasks or when nothing could flip). next_assignee_id is the user
    who became unblocked by this change, if any.
    """

    task: TaskEntity
    previous_status: TaskStatus
    changed_index: int | None = None
    next_assignee_id: str | None = None

    @property
    def became_done(self) -> bool:
        return self.previous_status != TaskStatus.DONE and self.task.status == TaskStatus.DONE


def calculate_sequential_deadlines(
    final_deadline: datetime,
    assignees: Sequence[TaskAssignee],
) -> list[TaskAssignee]:
    """Assign each assignee a window ending where the next one starts.

    Walks the list from last to first with a cursor starting at final_deadline:
    end = min(cursor, final_deadline), start = end - time_allocation hours,
    cursor = start. Start times that fall in the past are accepted.

    Args:
        final_deadline: Due time of the whole task.
        assignees: Ordered assignees; each time_allocation must be > 0.

    Returns:
        New TaskAssignee objects in input order with start/end set.

    Raises:
        EmptyAssigneeListException: If assignees is empty.
        ValidationException: If any time_allocation is not positive.
    """
    if not assignees:
        raise EmptyAssigneeListException()
    deadline = ensure_utc(final_deadline)
    cursor = deadline
    windows: list[TaskAssignee] = []
    for assignee in reversed(assignees):
        if assignee.time_allocation <= 0:
            raise ValidationException(
                f"Time allocation must be positive for {assignee.user_id}",
                field="time_allocation",
            )
        end_time = min(cursor, deadline)
        start_time = end_time - timedelta(hours=assignee.time_allocation)
        windows.append(replace(assignee, start_time=start_time, end_time=end_time))
        cursor = start_time
    windows.reverse()
    return windows


def _user_names(users: Iterable[UserEntity]) -> dict[str, str]:
    return {u.id: u.name for u in users}


def check_gate(
    task: TaskEntity,
    user_id: str,
    users: Iterable[UserEntity] = (),
    unknown_name: str = UNKNOWN_PREDECESSOR_NAME,
) -> GateResult:
    """Classify whether user_id may work on task right now.

    The first incomplete predecessor (lowest index) is reported as the blocker;
    unknown_name is used when its profile is not among users.
    """
    if not task.is_sequential:
        return GateResult(GateState.NOT_APPLICABLE)
    if not task.assignees:
        return GateResult(GateState.EMPTY_LIST)
    index = task.assignee_index(user_id)
    if index < 0:
        return GateResult(GateState.INVALID_ASSIGNEE)
    for predecessor in task.assignees[:index]:
        if not predecessor.is_completed:
            name = _user_names(users).get(predecessor.user_id, unknown_name)
            return GateResult(
                GateState.BLOCKED,
                index=index,
                blocked_by_user_id=predecessor.user_id,
                blocked_by_name=name,
            )
    return GateResult(GateState.UNBLOCKED, index=index)


def is_task_blocked(
    task: TaskEntity,
    user_id: str,
    users: Iterable[UserEntity] = (),
    unknown_name: str = UNKNOWN_PREDECESSOR_NAME,
) -> BlockStatus:
    """Return whether user_id is blocked on task, and by whom.

    Not blocked for regular tasks, for the first assignee, and for users who
    are not assignees at all.
    """
    gate = check_gate(task, user_id, users, unknown_name)
    if gate.is_blocked:
        return BlockStatus(blocked=True, blocked_by=gate.blocked_by_name)
    return BlockStatus(blocked=False)


def can_start_task(task: TaskEntity, user_id: str) -> bool:
    """Return True if user_id is the first assignee or all predecessors are done.

    Regular tasks can always be started; users outside the assignee list cannot
    start a sequential task.
    """
    return check_gate(task, user_id).can_start


def get_current_assignee(task: TaskEntity) -> str | None:
    """Return the user id of the lowest-index incomplete assignee, or None."""
    if not task.is_sequential:
        return None
    for assignee in task.assignees:
        if not assignee.is_completed:
            return assignee.user_id
    return None


def derive_task_status(task: TaskEntity) -> TaskStatus:
    """Derive a sequential task's status from its assignees.

    Done iff every assignee is complete; In Progress when some are; To Do when
    none are. Regular tasks keep the status their owner set.
    """
    if not task.is_sequential or not task.assignees:
        return task.status
    completed = sum(1 for a in task.assignees if a.is_completed)
    if completed == len(task.assignees):
        return TaskStatus.DONE
    if completed:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.TODO


def sequential_progress(task: TaskEntity) -> int:
    """Return percent of assignees complete (0 for regular or empty tasks)."""
    if not task.is_sequential or not task.assignees:
        return 0
    completed = sum(1 for a in task.assignees if a.is_completed)
    return round(completed * 100 / len(task.assignees))


def apply_completion_toggle(
    task: TaskEntity,
    is_checked: bool,
    now: datetime,
) -> CompletionChange:
    """Flip completion on task and return the updated copy.

    Sequential tasks: checking completes the current assignee (end_time is
    stamped with now) and sets the derived status; unchecking re-opens the
    most recently completed assignee, restores its scheduled end_time and
    resets status to To Do.
    Regular tasks: status becomes Done or To Do.
    """
    previous = task.status
    if not task.is_sequential or not task.assignees:
        status = TaskStatus.DONE if is_checked else TaskStatus.TODO
        return CompletionChange(task=replace(task, status=status), previous_status=previous)

    assignees = [replace(a) for a in task.assignees]
    changed: int | None = None
    if is_checked:
        for i, assignee in enumerate(assignees):
            if not assignee.is_completed:
                assignees[i] = replace(assignee, is_completed=True, end_time=ensure_utc(now))
                changed = i
                break
    else:
        for i in range(len(assignees) - 1, -1, -1):
            if assignees[i].is_completed:
                scheduled = calculate_sequential_deadlines(task.due, task.assignees)[i]
                assignees[i] = replace(
                    assignees[i], is_completed=False, end_time=scheduled.end_time
                )
                changed = i
                break

    updated = replace(task, assignees=assignees)
    if changed is None:
        return CompletionChange(task=updated, previous_status=previous)

    if is_checked:
        status = derive_task_status(updated)
    else:
        status = TaskStatus.TODO
    updated = replace(updated, status=status, progress=sequential_progress(updated))

    next_assignee: str | None = None
    if is_checked and changed + 1 < len(assignees):
        next_assignee = assignees[changed + 1].user_id
    return CompletionChange(
        task=updated,
        previous_status=previous,
        changed_index=changed,
        next_assignee_id=next_assignee,
    )


def newly_completed_index(before: TaskEntity, after: TaskEntity) -> int | None:
    """Return the first assignee index that went from incomplete to complete."""
    if not before.is_sequential:
        return None
    for i, (old, new) in enumerate(zip(before.assignees, after.assignees)):
        if not old.is_completed and new.is_completed:
            return i
    return None


def default_due_for_priority(priority: TaskPriority, now: datetime) -> datetime:
    """Return now plus the priority's default lead time (24 h for unknown)."""
    hours = PRIORITY_DEADLINE_HOURS.get(priority, 24)
    return ensure_utc(now) + timedelta(hours=hours)
