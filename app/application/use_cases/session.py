"""Session use case: sign in through the identity provider and issue a session token."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any, Protocol

from app.application.dtos.session import Identity, SessionResult
from app.application.interfaces.repositories import IUserRepository
from app.application.interfaces.services import IIdentityProvider
from app.domain.entities.user import DEFAULT_PERMISSIONS, UserEntity
from app.domain.enums import UserStatus
from app.domain.exceptions import AuthenticationException, ValidationException
from app.shared.messages import translate
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class ITokenIssuer(Protocol):
    """Creates signed session tokens (JWT) from claims."""

    def create_access_token(self, data: dict[str, Any]) -> str: ...


class SessionService:
    """Sign-in / sign-out for dashboard users.

    The identity provider owns credentials; the user repository owns the
    profile (role, department, permissions). A first sign-in provisions a
    profile with view-only permissions.
    """

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        user_repo: IUserRepository,
        token_issuer: ITokenIssuer,
        token_ttl_minutes: int = 480,
    ) -> None:
        self._identity = identity_provider
        self._users = user_repo
        self._tokens = token_issuer
        self._ttl = timedelta(minutes=token_ttl_minutes)

    async def sign_in(self, email: str, password: str) -> SessionResult:
        """Authenticate, load or provision the profile, and return a session token.

        Raises:
            ValidationException: Email or password empty.
            AuthenticationException: Provider rejected the credentials (localized
                message), or the profile is inactive.
        """
        if not email or not email.strip():
            raise ValidationException("Email is required", field="email")
        if not password:
            raise ValidationException("Password is required", field="password")

        identity = await self._identity.sign_in(email.strip(), password)
        user = await self.load_profile(identity)
        if user.status == UserStatus.INACTIVE:
            raise AuthenticationException(
                translate("auth.user_disabled"), provider_code="USER_DISABLED"
            )

        now = utc_now()
        user = replace(user, last_login=now)
        await self._users.update(user, {"last_login"})
        token = self._tokens.create_access_token({"sub": user.id, "email": user.email})
        logger.info("User %s signed in", user.id)
        return SessionResult(access_token=token, expires_at=now + self._ttl, user=user)

    async def load_profile(self, identity: Identity) -> UserEntity:
        """Return the stored profile for identity, creating a default one if missing."""
        user = await self._users.get_by_id(identity.uid)
        if user is not None:
            return user
        user = UserEntity(
            id=identity.uid,
            name=identity.display_name or identity.email.split("@")[0],
            email=identity.email,
            role=translate("profile.default_role"),
            dept=translate("profile.default_dept"),
            permissions=set(DEFAULT_PERMISSIONS),
        )
        logger.info("Provisioning default profile for %s", identity.uid)
        return await self._users.create(user)

    async def sign_out(self, identity: Identity) -> None:
        await self._identity.sign_out(identity)
