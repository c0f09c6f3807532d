"""Reports API: statistics, performance tables and the dashboard summary."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    CurrentUser,
    get_directory_service,
    get_report_service,
    get_task_service,
    require_permission,
)
from app.application.services.report_service import ReportService
from app.application.use_cases.directory import DirectoryService
from app.application.use_cases.tasks import TaskService
from app.domain.entities.user import UserEntity
from app.domain.enums import Permission
from app.schemas.report import (
    DashboardStatsResponse,
    DepartmentPerformanceResponse,
    StatusCountResponse,
    TaskStatisticsResponse,
    UserPerformanceResponse,
)

router = APIRouter()

ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
DirectoryDep = Annotated[DirectoryService, Depends(get_directory_service)]
ReportViewer = Annotated[UserEntity, Depends(require_permission(Permission.VIEW_REPORTS))]


@router.get("/statistics", response_model=TaskStatisticsResponse)
async def task_statistics(
    viewer: ReportViewer, reports: ReportServiceDep, dept: str | None = None
):
    return TaskStatisticsResponse.model_validate(await reports.task_statistics(dept))


@router.get("/performance/users", response_model=list[UserPerformanceResponse])
async def user_performance(
    viewer: ReportViewer,
    reports: ReportServiceDep,
    tasks: TaskServiceDep,
    directory: DirectoryDep,
):
    rows = reports.user_performance(
        await directory.list_users(), await tasks.list_tasks(viewer)
    )
    return [UserPerformanceResponse.model_validate(r) for r in rows]


@router.get("/performance/departments", response_model=list[DepartmentPerformanceResponse])
async def department_performance(
    viewer: ReportViewer,
    reports: ReportServiceDep,
    tasks: TaskServiceDep,
    directory: DirectoryDep,
):
    rows = reports.department_performance(
        await directory.list_users(), await tasks.list_tasks(viewer)
    )
    return [DepartmentPerformanceResponse.model_validate(r) for r in rows]


@router.get("/status-distribution", response_model=list[StatusCountResponse])
async def status_distribution(
    viewer: ReportViewer, reports: ReportServiceDep, tasks: TaskServiceDep
):
    counts = reports.status_distribution(await tasks.list_tasks(viewer))
    return [StatusCountResponse.model_validate(c) for c in counts]


@router.get("/dashboard", response_model=DashboardStatsResponse)
async def dashboard(current_user: CurrentUser, reports: ReportServiceDep, tasks: TaskServiceDep):
    """Summary for the signed-in user over the tasks they can see."""
    stats = reports.dashboard_stats(current_user, await tasks.list_tasks(current_user))
    return DashboardStatsResponse.model_validate(stats)
