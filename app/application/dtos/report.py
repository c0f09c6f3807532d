"""Report read-models (statistics and performance rows)."""

from dataclasses import dataclass, field

from app.domain.entities.task import TaskEntity


@dataclass(frozen=True)
class DepartmentStats:
    total: int
    completed: int
    overdue: int


@dataclass(frozen=True)
class TaskStatistics:
    total: int
    completed: int
    in_progress: int
    todo: int
    overdue: int
    completion_rate: int
    department_stats: dict[str, DepartmentStats] = field(default_factory=dict)


@dataclass(frozen=True)
class UserPerformance:
    user_id: str
    name: str
    dept: str
    completed: int
    total: int
    completion_rate: int
    on_time: int
    on_time_rate: int


@dataclass(frozen=True)
class DepartmentPerformance:
    name: str
    total: int
    completed: int
    overdue: int
    completion_rate: int


@dataclass(frozen=True)
class StatusCount:
    status: str
    count: int


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for the dashboard landing view."""

    statistics: TaskStatistics
    upcoming: list[TaskEntity]
    my_open_tasks: int
    pending_approvals: int
