"""Auth API: email/password sign-in, sign-out and current profile.

Credentials are checked by the identity provider; the session token returned
here is the Bearer token for every other route.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import CurrentUser, get_session_service
from app.application.dtos.session import Identity
from app.application.use_cases.session import SessionService
from app.core.limiter import limit_auth
from app.schemas.auth import LoginRequest, SessionResponse
from app.schemas.user import UserResponse

router = APIRouter()


@router.post("/login", response_model=SessionResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    sessions: Annotated[SessionService, Depends(get_session_service)],
):
    """Sign in; a first sign-in provisions a view-only profile.

    Failures return 401 with a localized message.
    """
    result = await sessions.sign_in(body.email, body.password)
    return SessionResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_at=result.expires_at,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/logout", status_code=204)
async def logout(
    current_user: CurrentUser,
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> Response:
    """End the provider session. The client drops its token."""
    await sessions.sign_out(Identity(uid=current_user.id, email=current_user.email))
    return Response(status_code=204)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser):
    """Return the signed-in profile (Authorization: Bearer <token>)."""
    return UserResponse.model_validate(current_user)
