"""User and department domain entities."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import BadgeCriteria, Permission, UserStatus
from app.domain.exceptions import ValidationException

# Assigned when a signed-in identity has no profile document yet.
DEFAULT_PERMISSIONS: frozenset[str] = frozenset({Permission.VIEW_TASKS.value})


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    color: str
    criteria_type: BadgeCriteria
    threshold: int
    created_at: datetime | None = None


@dataclass
class UserEntity:
    """Dashboard actor with a role label, a department and a permission set.

    The permission set is the only input to authorization checks; the role is
    a display label (also used to resolve template default assignees).
    """

    id: str
    name: str
    email: str
    role: str
    dept: str
    permissions: set[str] = field(default_factory=lambda: set(DEFAULT_PERMISSIONS))
    status: UserStatus = UserStatus.ACTIVE
    avatar: str | None = None
    badges: list[Badge] = field(default_factory=list)
    last_login: datetime | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("User ID is required", field="id")

    def has_permission(self, permission: str | Permission) -> bool:
        """Return True if the user holds permission, or holds 'admin'."""
        name = permission.value if isinstance(permission, Permission) else permission
        if Permission.ADMIN.value in self.permissions:
            return True
        return name in self.permissions

    def has_any_permission(self, *permissions: str | Permission) -> bool:
        return any(self.has_permission(p) for p in permissions)


@dataclass
class DepartmentEntity:
    """Named grouping of users and tasks (e.g. BOH, FOH)."""

    id: str
    name: str
    description: str | None = None
    manager_id: str | None = None
    color: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationException("Department name is required", field="name")
