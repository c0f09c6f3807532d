"""User, department and badge API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import BadgeCriteria, UserStatus


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    icon: str
    color: str
    criteria_type: BadgeCriteria
    threshold: int
    created_at: datetime | None = None


class BadgeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    icon: str = "award"
    color: str = "orange"
    criteria_type: BadgeCriteria = BadgeCriteria.TASK_COUNT
    threshold: int = Field(default=5, ge=0)


class UserResponse(BaseModel):
    """Profile as shown in the directory (no credentials)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    dept: str
    permissions: list[str]
    status: UserStatus
    avatar: str | None = None
    badges: list[BadgeResponse] = []
    last_login: datetime | None = None


class UserProfileUpdate(BaseModel):
    """Partial profile update; only set fields are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: str | None = Field(default=None, min_length=1, max_length=100)
    status: UserStatus | None = None
    avatar: str | None = None


class PermissionsUpdate(BaseModel):
    permissions: list[str]


class DepartmentMove(BaseModel):
    dept: str = Field(..., min_length=1)


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    manager_id: str | None = None
    color: str | None = None


class DepartmentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    manager_id: str | None = None
    color: str | None = None


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    manager_id: str | None = None
    color: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
