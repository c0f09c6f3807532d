"""Firebase Authentication over the Identity Toolkit REST API (implements IIdentityProvider)."""

from __future__ import annotations

import logging

import httpx

from app.application.dtos.session import Identity
from app.domain.exceptions import AuthenticationException, BackingStoreException
from app.shared.messages import translate

logger = logging.getLogger(__name__)

_BASE = "https://identitytoolkit.googleapis.com/v1"

# Identity Toolkit error code -> message key
_ERROR_MESSAGES: dict[str, str] = {
    "EMAIL_NOT_FOUND": "auth.user_not_found",
    "INVALID_PASSWORD": "auth.wrong_password",
    "INVALID_LOGIN_CREDENTIALS": "auth.invalid_credential",
    "INVALID_EMAIL": "auth.invalid_credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth.too_many_requests",
    "USER_DISABLED": "auth.user_disabled",
}


def _error_code(resp: httpx.Response) -> str:
    """Extract the provider code; messages look like 'CODE' or 'CODE : detail'."""
    try:
        message = resp.json().get("error", {}).get("message", "")
    except ValueError:
        return ""
    return message.split(":", 1)[0].strip()


def auth_error(code: str) -> AuthenticationException:
    """Map a provider code to an AuthenticationException with a localized message."""
    key = _ERROR_MESSAGES.get(code, "auth.unknown")
    return AuthenticationException(translate(key), provider_code=code or None)


class FirebaseIdentityProvider:
    """Email/password sign-in against Firebase Authentication."""

    def __init__(self, api_key: str, *, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=15.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _post(self, endpoint: str, body: dict) -> dict:
        try:
            resp = await self._http.post(
                f"{_BASE}/accounts:{endpoint}", params={"key": self._api_key}, json=body
            )
        except httpx.HTTPError as exc:
            logger.warning("Identity Toolkit %s failed: %s", endpoint, exc)
            raise BackingStoreException(f"identity {endpoint}", str(exc)) from exc
        if resp.status_code == 200:
            return resp.json()
        code = _error_code(resp)
        logger.info("Identity Toolkit %s rejected: %s", endpoint, code or resp.status_code)
        raise auth_error(code)

    async def sign_in(self, email: str, password: str) -> Identity:
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return Identity(
            uid=data["localId"],
            email=data.get("email", email),
            display_name=data.get("displayName") or None,
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        """Register a new email/password account (used by the seed script)."""
        body: dict = {"email": email, "password": password, "returnSecureToken": True}
        if display_name:
            body["displayName"] = display_name
        data = await self._post("signUp", body)
        return Identity(
            uid=data["localId"],
            email=data.get("email", email),
            display_name=display_name,
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )

    async def sign_out(self, identity: Identity) -> None:
        # ID tokens are short-lived and held by the caller; nothing to revoke server-side.
        logger.debug("Signed out %s", identity.uid)
