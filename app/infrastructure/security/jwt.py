"""Session tokens for the dashboard API.

After the identity provider accepts a sign-in, the API issues its own
HS256 JWT naming the profile (sub) so later requests never hit the provider.
Tokens carry a "typ" of "session"; anything else is rejected.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.datetime import utc_now

SESSION_TOKEN_TYPE = "session"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a session token carrying data plus iat, exp and typ claims.

    Args:
        data: Claims to encode; must include sub (the profile id).
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    settings = get_settings()
    issued_at = utc_now()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        **data,
        "typ": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Decode a session token and return its claims.

    Raises:
        ValueError: Bad signature, expired, wrong type or no sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if payload.get("typ") != SESSION_TOKEN_TYPE:
        raise ValueError("Not a session token")
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
