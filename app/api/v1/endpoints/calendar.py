"""Calendar API: task due blocks and sequential assignee windows."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    CurrentUser,
    get_calendar_service,
    get_directory_service,
    get_task_service,
)
from app.application.services.calendar_service import CalendarService
from app.application.use_cases.directory import DirectoryService
from app.application.use_cases.tasks import TaskService
from app.schemas.calendar import CalendarEventResponse

router = APIRouter()


@router.get("/events", response_model=list[CalendarEventResponse])
async def calendar_events(
    current_user: CurrentUser,
    tasks: Annotated[TaskService, Depends(get_task_service)],
    directory: Annotated[DirectoryService, Depends(get_directory_service)],
    calendar: Annotated[CalendarService, Depends(get_calendar_service)],
    user_id: str | None = None,
    dept: str | None = None,
    sort_by_person: bool = False,
    include_windows: bool = True,
):
    events = calendar.build_events(
        await tasks.list_tasks(current_user),
        await directory.list_users(),
        user_filter=user_id,
        dept_filter=dept,
        sort_by_person=sort_by_person,
        include_windows=include_windows,
    )
    return [CalendarEventResponse.model_validate(e) for e in events]
