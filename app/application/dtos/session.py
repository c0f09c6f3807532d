"""DTOs for sign-in and session tokens."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.user import UserEntity


@dataclass(frozen=True)
class Identity:
    """Identity returned by the identity provider after a successful sign-in."""

    uid: str
    email: str
    display_name: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """Signed session token plus the profile it was issued for."""

    access_token: str
    expires_at: datetime
    user: UserEntity
    token_type: str = "bearer"
