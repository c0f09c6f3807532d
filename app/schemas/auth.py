"""Auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Request body for email/password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Session token plus the signed-in profile."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse
