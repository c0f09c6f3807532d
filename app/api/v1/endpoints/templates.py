"""Task template API: reusable task blueprints and form pre-filling."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import CurrentUser, get_directory_service
from app.application.use_cases.directory import DirectoryService
from app.core.limiter import limit_writes
from app.schemas.task import TaskDraftResponse
from app.schemas.template import (
    TemplateApplyRequest,
    TemplateCreate,
    TemplateResponse,
    TemplateUpdate,
)

router = APIRouter()

DirectoryDep = Annotated[DirectoryService, Depends(get_directory_service)]


@router.get("", response_model=list[TemplateResponse])
async def list_templates(current_user: CurrentUser, directory: DirectoryDep):
    return [TemplateResponse.model_validate(t) for t in await directory.list_templates()]


@router.post("", response_model=TemplateResponse, status_code=201)
@limit_writes
async def create_template(
    request: Request, body: TemplateCreate, current_user: CurrentUser, directory: DirectoryDep
):
    template = await directory.create_template(current_user, body.to_entity())
    return TemplateResponse.model_validate(template)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: str, current_user: CurrentUser, directory: DirectoryDep):
    return TemplateResponse.model_validate(await directory.get_template(template_id))


@router.patch("/{template_id}", response_model=TemplateResponse)
@limit_writes
async def update_template(
    request: Request,
    template_id: str,
    body: TemplateUpdate,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    template = await directory.update_template(current_user, template_id, body.to_changes())
    return TemplateResponse.model_validate(template)


@router.delete("/{template_id}", status_code=204)
@limit_writes
async def delete_template(
    request: Request, template_id: str, current_user: CurrentUser, directory: DirectoryDep
) -> Response:
    await directory.delete_template(current_user, template_id)
    return Response(status_code=204)


@router.post("/{template_id}/apply", response_model=TaskDraftResponse)
async def apply_template(
    template_id: str,
    body: TemplateApplyRequest,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    """Return a task draft; default assignee roles resolve to the first matching user."""
    draft = await directory.apply_template(
        template_id, responsible=body.responsible, accountable=body.accountable
    )
    return TaskDraftResponse.model_validate(draft)
