"""Department API: list for everyone signed in, edits for department managers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import CurrentUser, get_directory_service, require_permission
from app.application.use_cases.directory import DirectoryService
from app.core.limiter import limit_writes
from app.domain.entities.user import UserEntity
from app.domain.enums import Permission
from app.schemas.user import DepartmentCreate, DepartmentResponse, DepartmentUpdate

router = APIRouter()

DirectoryDep = Annotated[DirectoryService, Depends(get_directory_service)]


@router.get("", response_model=list[DepartmentResponse])
async def list_departments(current_user: CurrentUser, directory: DirectoryDep):
    return [DepartmentResponse.model_validate(d) for d in await directory.list_departments()]


@router.post("", response_model=DepartmentResponse, status_code=201)
@limit_writes
async def create_department(
    request: Request, body: DepartmentCreate, current_user: CurrentUser, directory: DirectoryDep
):
    department = await directory.create_department(
        current_user,
        body.name,
        description=body.description,
        manager_id=body.manager_id,
        color=body.color,
    )
    return DepartmentResponse.model_validate(department)


@router.post("/seed", response_model=list[DepartmentResponse])
@limit_writes
async def seed_departments(
    request: Request,
    directory: DirectoryDep,
    _: Annotated[UserEntity, Depends(require_permission(Permission.MANAGE_DEPARTMENTS))],
):
    """Create the default departments when none exist yet."""
    return [DepartmentResponse.model_validate(d) for d in await directory.seed_defaults()]


@router.patch("/{department_id}", response_model=DepartmentResponse)
@limit_writes
async def update_department(
    request: Request,
    department_id: str,
    body: DepartmentUpdate,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    department = await directory.update_department(
        current_user, department_id, body.model_dump(exclude_unset=True)
    )
    return DepartmentResponse.model_validate(department)


@router.delete("/{department_id}", status_code=204)
@limit_writes
async def delete_department(
    request: Request, department_id: str, current_user: CurrentUser, directory: DirectoryDep
) -> Response:
    await directory.delete_department(current_user, department_id)
    return Response(status_code=204)
