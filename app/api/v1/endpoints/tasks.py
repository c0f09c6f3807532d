"""Task API: board listing, CRUD, sequential gating, completion, comments,
approval, feedback and attachments.

Thin routes delegating to TaskService; domain exceptions are mapped to HTTP
responses by the registered exception handlers.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile

from app.api.v1.dependencies import CurrentUser, get_task_service
from app.application.dtos.task import TaskFilter
from app.application.use_cases.tasks import TaskService
from app.core.limiter import limit_upload, limit_writes
from app.domain.enums import TaskPriority, TaskStatus
from app.schemas.task import (
    AttachmentResponse,
    CommentCreateRequest,
    CommentResponse,
    CompletionToggleRequest,
    FeedbackRequest,
    GateResponse,
    StatusChangeRequest,
    TaskCreateRequest,
    TaskPageResponse,
    TaskResponse,
    TaskUpdateRequest,
)

router = APIRouter()

TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    current_user: CurrentUser,
    tasks: TaskServiceDep,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    dept: str | None = None,
    assignee: str | None = None,
    due_from: datetime | None = None,
    due_to: datetime | None = None,
    search: str | None = Query(default=None, max_length=200),
    tags: list[str] = Query(default=[]),
):
    """List visible tasks, newest first, narrowed by the given filters."""
    filter_ = TaskFilter(
        status=status,
        priority=priority,
        dept=dept,
        assignee=assignee,
        due_from=due_from,
        due_to=due_to,
        search=search,
        tags=frozenset(tags),
    )
    return [TaskResponse.model_validate(t) for t in await tasks.list_tasks(current_user, filter_)]


@router.get("/page", response_model=TaskPageResponse)
async def list_tasks_page(
    current_user: CurrentUser,
    tasks: TaskServiceDep,
    page_size: int | None = Query(default=None, ge=1, le=100),
    cursor: str | None = None,
):
    """One page of tasks (newest first); pass next_cursor back to continue."""
    page = await tasks.list_tasks_page(current_user, page_size, cursor)
    return TaskPageResponse.model_validate(page)


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    """Create a task; sequential tasks get their assignee windows computed."""
    task = await tasks.create_task(current_user, body.to_command())
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, current_user: CurrentUser, tasks: TaskServiceDep):
    return TaskResponse.model_validate(await tasks.get_task(current_user, task_id))


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    """Partial update; only fields present in the body change."""
    task = await tasks.update_task(current_user, task_id, body.to_changes())
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
@limit_writes
async def delete_task(
    request: Request, task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
) -> Response:
    await tasks.delete_task(current_user, task_id)
    return Response(status_code=204)


@router.post("/{task_id}/status", response_model=TaskResponse)
@limit_writes
async def change_status(
    request: Request,
    task_id: str,
    body: StatusChangeRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    """Move a task to another column. 409 if the actor is still waiting on a predecessor."""
    task = await tasks.change_status(current_user, task_id, body.status)
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/completion", response_model=TaskResponse)
@limit_writes
async def toggle_completion(
    request: Request,
    task_id: str,
    body: CompletionToggleRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    """Check or uncheck completion; sequential tasks advance one step at a time."""
    task = await tasks.toggle_completion(current_user, task_id, body.checked)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}/gate", response_model=GateResponse)
async def get_gate(
    task_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
    user_id: str | None = None,
):
    """Whether user_id (default: caller) may work on the task now, and who blocks them."""
    gate = await tasks.gate_status(current_user, task_id, user_id)
    return GateResponse.model_validate(gate)


@router.post("/{task_id}/comments", response_model=CommentResponse, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    task_id: str,
    body: CommentCreateRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    """Add a comment; @user_id mentions notify those users."""
    comment = await tasks.add_comment(current_user, task_id, body.content)
    return CommentResponse.model_validate(comment)


@router.post("/{task_id}/approve", response_model=TaskResponse)
@limit_writes
async def approve_task(
    request: Request, task_id: str, current_user: CurrentUser, tasks: TaskServiceDep
):
    return TaskResponse.model_validate(await tasks.approve_task(current_user, task_id))


@router.post("/{task_id}/feedback", response_model=TaskResponse)
@limit_writes
async def submit_feedback(
    request: Request,
    task_id: str,
    body: FeedbackRequest,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    task = await tasks.submit_feedback(current_user, task_id, body.rating, body.comment)
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/attachments", response_model=AttachmentResponse, status_code=201)
@limit_upload
async def upload_attachment(
    request: Request,
    task_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
    file: UploadFile = File(...),
):
    """Upload a file to storage and attach it to the task."""
    content = await file.read()
    attachment = await tasks.add_attachment(
        current_user,
        task_id,
        file.filename or "",
        content,
        file.content_type or "application/octet-stream",
    )
    return AttachmentResponse.model_validate(attachment)


@router.delete("/{task_id}/attachments/{attachment_id}", response_model=TaskResponse)
@limit_writes
async def remove_attachment(
    request: Request,
    task_id: str,
    attachment_id: str,
    current_user: CurrentUser,
    tasks: TaskServiceDep,
):
    task = await tasks.remove_attachment(current_user, task_id, attachment_id)
    return TaskResponse.model_validate(task)
