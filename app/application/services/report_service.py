"""Report service: task statistics and per-user / per-department performance.

Pure aggregation over snapshots; the data is loaded by the caller (or by
task_statistics, which reads the task repository directly).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from app.application.dtos.report import (
    DashboardStats,
    DepartmentPerformance,
    DepartmentStats,
    StatusCount,
    TaskStatistics,
    UserPerformance,
)
from app.application.interfaces.repositories import ITaskRepository
from app.domain.entities.task import TaskEntity
from app.domain.entities.user import UserEntity
from app.domain.enums import TaskStatus
from app.shared.utils.datetime import utc_now

UPCOMING_WINDOW = timedelta(hours=24)


def _rate(part: int, total: int) -> int:
    return round(part * 100 / total) if total else 0


def is_completed_on_time(task: TaskEntity, now: datetime) -> bool:
    """Done tasks finished by their due time.

    Uses completed_at when recorded; older documents without it count as on
    time while the due time is still ahead of now.
    """
    if task.status != TaskStatus.DONE:
        return False
    if task.completed_at is not None:
        return task.completed_at <= task.due
    return task.due >= now


class ReportService:
    """Aggregations for the reports and dashboard views."""

    def __init__(self, task_repo: ITaskRepository) -> None:
        self._task_repo = task_repo

    async def task_statistics(self, dept: str | None = None) -> TaskStatistics:
        """Totals per status, completion rate and per-department stats."""
        tasks = await self._task_repo.list_tasks(dept=dept)
        return self.compute_statistics(tasks)

    def compute_statistics(self, tasks: Sequence[TaskEntity]) -> TaskStatistics:
        counts = Counter(t.status for t in tasks)
        by_dept: dict[str, list[TaskEntity]] = {}
        for task in tasks:
            by_dept.setdefault(task.dept, []).append(task)
        department_stats = {
            dept: DepartmentStats(
                total=len(items),
                completed=sum(1 for t in items if t.status == TaskStatus.DONE),
                overdue=sum(1 for t in items if t.status == TaskStatus.OVERDUE),
            )
            for dept, items in by_dept.items()
        }
        return TaskStatistics(
            total=len(tasks),
            completed=counts[TaskStatus.DONE],
            in_progress=counts[TaskStatus.IN_PROGRESS],
            todo=counts[TaskStatus.TODO],
            overdue=counts[TaskStatus.OVERDUE],
            completion_rate=_rate(counts[TaskStatus.DONE], len(tasks)),
            department_stats=department_stats,
        )

    def user_performance(
        self,
        users: Iterable[UserEntity],
        tasks: Sequence[TaskEntity],
        now: datetime | None = None,
    ) -> list[UserPerformance]:
        """One row per user with at least one task as responsible."""
        now = now or utc_now()
        rows: list[UserPerformance] = []
        for user in users:
            own = [t for t in tasks if t.responsible == user.id]
            if not own:
                continue
            completed = sum(1 for t in own if t.status == TaskStatus.DONE)
            on_time = sum(1 for t in own if is_completed_on_time(t, now))
            rows.append(
                UserPerformance(
                    user_id=user.id,
                    name=user.name,
                    dept=user.dept,
                    completed=completed,
                    total=len(own),
                    completion_rate=_rate(completed, len(own)),
                    on_time=on_time,
                    on_time_rate=_rate(on_time, len(own)),
                )
            )
        return rows

    def department_performance(
        self,
        users: Iterable[UserEntity],
        tasks: Sequence[TaskEntity],
    ) -> list[DepartmentPerformance]:
        """One row per department that has users and at least one task."""
        names = list(dict.fromkeys(u.dept for u in users))
        rows: list[DepartmentPerformance] = []
        for name in names:
            items = [t for t in tasks if t.dept == name]
            if not items:
                continue
            completed = sum(1 for t in items if t.status == TaskStatus.DONE)
            rows.append(
                DepartmentPerformance(
                    name=name,
                    total=len(items),
                    completed=completed,
                    overdue=sum(1 for t in items if t.status == TaskStatus.OVERDUE),
                    completion_rate=_rate(completed, len(items)),
                )
            )
        return rows

    def status_distribution(self, tasks: Sequence[TaskEntity]) -> list[StatusCount]:
        """Count per status, in lifecycle order, including zero counts."""
        counts = Counter(t.status for t in tasks)
        return [StatusCount(status=s.value, count=counts[s]) for s in TaskStatus]

    def dashboard_stats(
        self,
        user: UserEntity,
        tasks: Sequence[TaskEntity],
        now: datetime | None = None,
    ) -> DashboardStats:
        """Statistics plus unfinished tasks due within the next 24 hours."""
        now = now or utc_now()
        upcoming = sorted(
            (
                t
                for t in tasks
                if t.status != TaskStatus.DONE and now < t.due <= now + UPCOMING_WINDOW
            ),
            key=lambda t: t.due,
        )
        return DashboardStats(
            statistics=self.compute_statistics(tasks),
            upcoming=upcoming,
            my_open_tasks=sum(
                1 for t in tasks if t.status != TaskStatus.DONE and t.involves(user.id)
            ),
            pending_approvals=sum(
                1
                for t in tasks
                if t.status == TaskStatus.DONE and not t.is_approved and t.accountable == user.id
            ),
        )
