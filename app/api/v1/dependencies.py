"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories and application services.
Repositories come from app.state.backend (built in lifespan for the
configured DATABASE_BACKEND); routes depend only on these dependencies,
never on infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.authorization_service import AuthorizationService
from app.application.services.calendar_service import CalendarService
from app.application.services.notification_service import NotificationService
from app.application.services.report_service import ReportService
from app.application.use_cases.directory import DirectoryService
from app.application.use_cases.session import SessionService
from app.application.use_cases.tasks import TaskService
from app.core.config import get_settings
from app.domain.entities.user import UserEntity
from app.domain.enums import Permission, UserStatus
from app.infrastructure.backend import Backend
from app.infrastructure.security.jwt import create_access_token, verify_token


class AuthSecurity:
    """Session token creation provided via DI (no direct infra imports in routes)."""

    def create_access_token(self, data: dict) -> str:
        return create_access_token(data)


def get_auth_security() -> AuthSecurity:
    return AuthSecurity()


def get_backend(request: Request) -> Backend:
    """Return the backend built at startup; 503 if the app has not started."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(status_code=503, detail="Backend not initialized")
    return backend


BackendDep = Annotated[Backend, Depends(get_backend)]


def get_authorization_service() -> AuthorizationService:
    return AuthorizationService()


def get_notification_service(backend: BackendDep) -> NotificationService:
    return NotificationService(backend.notifications)


def get_task_service(
    backend: BackendDep,
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> TaskService:
    return TaskService(
        backend.tasks,
        backend.users,
        notifications,
        authorization=authorization,
        blob_store=backend.blobs,
        page_size=get_settings().default_page_size,
    )


def get_directory_service(
    backend: BackendDep,
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> DirectoryService:
    return DirectoryService(
        backend.departments, backend.users, backend.templates, authorization
    )


def get_session_service(
    backend: BackendDep,
    security: Annotated[AuthSecurity, Depends(get_auth_security)],
) -> SessionService:
    return SessionService(
        backend.identity,
        backend.users,
        security,
        token_ttl_minutes=get_settings().access_token_expire_minutes,
    )


def get_report_service(backend: BackendDep) -> ReportService:
    return ReportService(backend.tasks)


def get_calendar_service() -> CalendarService:
    return CalendarService()


# ---- Auth ----

_http_bearer = HTTPBearer(auto_error=False)


async def resolve_user_from_token(backend: Backend, token: str) -> UserEntity | None:
    """Return the active profile named by a session token, or None."""
    try:
        payload = verify_token(token)
    except ValueError:
        return None
    user = await backend.users.get_by_id(payload["sub"])
    if user is None or user.status == UserStatus.INACTIVE:
        return None
    return user


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    backend: BackendDep,
) -> UserEntity | None:
    """Return current user from JWT if present; else None. Use for optional auth routes."""
    if not credentials:
        return None
    return await resolve_user_from_token(backend, credentials.credentials)


async def get_current_user(
    current_user: Annotated[UserEntity | None, Depends(get_current_user_optional)],
) -> UserEntity:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


CurrentUser = Annotated[UserEntity, Depends(get_current_user)]


def require_permission(*permissions: Permission):
    """Dependency factory: require JWT auth and any one of permissions."""

    async def _require(
        current_user: CurrentUser,
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserEntity:
        auth_svc.require_any(current_user, *permissions)
        return current_user

    return _require
