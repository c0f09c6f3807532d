"""User API: directory listing and profile administration."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentUser, get_directory_service
from app.application.use_cases.directory import DirectoryService
from app.core.limiter import limit_writes
from app.schemas.user import (
    BadgeCreate,
    BadgeResponse,
    DepartmentMove,
    PermissionsUpdate,
    UserProfileUpdate,
    UserResponse,
)

router = APIRouter()

DirectoryDep = Annotated[DirectoryService, Depends(get_directory_service)]


@router.get("", response_model=list[UserResponse])
async def list_users(current_user: CurrentUser, directory: DirectoryDep, dept: str | None = None):
    """List profiles sorted by name, optionally for one department."""
    return [UserResponse.model_validate(u) for u in await directory.list_users(dept)]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, current_user: CurrentUser, directory: DirectoryDep):
    return UserResponse.model_validate(await directory.get_user(user_id))


@router.patch("/{user_id}", response_model=UserResponse)
@limit_writes
async def update_profile(
    request: Request,
    user_id: str,
    body: UserProfileUpdate,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    """Users may edit their own name and avatar; anything else needs manage_users."""
    user = await directory.update_profile(
        current_user, user_id, body.model_dump(exclude_unset=True)
    )
    return UserResponse.model_validate(user)


@router.put("/{user_id}/permissions", response_model=UserResponse)
@limit_writes
async def update_permissions(
    request: Request,
    user_id: str,
    body: PermissionsUpdate,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    user = await directory.update_permissions(current_user, user_id, body.permissions)
    return UserResponse.model_validate(user)


@router.put("/{user_id}/department", response_model=UserResponse)
@limit_writes
async def move_to_department(
    request: Request,
    user_id: str,
    body: DepartmentMove,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    user = await directory.move_user_to_department(current_user, user_id, body.dept)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/badges", response_model=BadgeResponse, status_code=201)
@limit_writes
async def award_badge(
    request: Request,
    user_id: str,
    body: BadgeCreate,
    current_user: CurrentUser,
    directory: DirectoryDep,
):
    badge = await directory.award_badge(
        current_user,
        user_id,
        body.name,
        body.description,
        icon=body.icon,
        color=body.color,
        criteria_type=body.criteria_type,
        threshold=body.threshold,
    )
    return BadgeResponse.model_validate(badge)
