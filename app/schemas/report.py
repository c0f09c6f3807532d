"""Report and dashboard API schemas (mirror the report read-models)."""

from pydantic import BaseModel, ConfigDict

from app.schemas.task import TaskResponse


class DepartmentStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    overdue: int


class TaskStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    in_progress: int
    todo: int
    overdue: int
    completion_rate: int
    department_stats: dict[str, DepartmentStatsResponse] = {}


class UserPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    dept: str
    completed: int
    total: int
    completion_rate: int
    on_time: int
    on_time_rate: int


class DepartmentPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    total: int
    completed: int
    overdue: int
    completion_rate: int


class StatusCountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    count: int


class DashboardStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    statistics: TaskStatisticsResponse
    upcoming: list[TaskResponse]
    my_open_tasks: int
    pending_approvals: int
