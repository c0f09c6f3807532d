"""Application DTOs (no persistence dependency)."""

from app.application.dtos.calendar import CalendarEvent
from app.application.dtos.report import (
    DashboardStats,
    DepartmentPerformance,
    DepartmentStats,
    StatusCount,
    TaskStatistics,
    UserPerformance,
)
from app.application.dtos.session import Identity, SessionResult
from app.application.dtos.task import AssigneeInput, TaskCreate, TaskFilter, TaskPage

__all__ = [
    "AssigneeInput",
    "CalendarEvent",
    "DashboardStats",
    "DepartmentPerformance",
    "DepartmentStats",
    "Identity",
    "SessionResult",
    "StatusCount",
    "TaskCreate",
    "TaskFilter",
    "TaskPage",
    "TaskStatistics",
    "UserPerformance",
]
