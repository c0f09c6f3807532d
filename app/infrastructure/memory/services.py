"""In-memory identity provider and blob store for the 'memory' backend."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from app.application.dtos.session import Identity
from app.domain.exceptions import AuthenticationException
from app.shared.messages import translate
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


@dataclass
class _Account:
    uid: str
    email: str
    password: str
    display_name: str | None = None
    disabled: bool = False


class InMemoryIdentityProvider:
    """Email/password accounts kept in a dict, with provider-style error codes."""

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}
        self.signed_out: list[str] = []

    async def create_account(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        uid: str | None = None,
    ) -> Identity:
        key = email.strip().lower()
        if key in self._accounts:
            raise AuthenticationException(translate("auth.unknown"), provider_code="EMAIL_EXISTS")
        account = _Account(uid or generate_cuid(), email.strip(), password, display_name)
        self._accounts[key] = account
        return Identity(uid=account.uid, email=account.email, display_name=display_name)

    def disable(self, email: str) -> None:
        self._accounts[email.strip().lower()].disabled = True

    async def sign_in(self, email: str, password: str) -> Identity:
        account = self._accounts.get(email.strip().lower())
        if account is None:
            raise AuthenticationException(
                translate("auth.user_not_found"), provider_code="EMAIL_NOT_FOUND"
            )
        if not hmac.compare_digest(account.password, password):
            raise AuthenticationException(
                translate("auth.wrong_password"), provider_code="INVALID_PASSWORD"
            )
        if account.disabled:
            raise AuthenticationException(
                translate("auth.user_disabled"), provider_code="USER_DISABLED"
            )
        return Identity(
            uid=account.uid,
            email=account.email,
            display_name=account.display_name,
            id_token=generate_cuid(),
        )

    async def sign_out(self, identity: Identity) -> None:
        self.signed_out.append(identity.uid)


class InMemoryBlobStore:
    """Blob store backed by a dict; URLs use the memory:// scheme."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        self.objects[path] = (content, content_type)
        logger.debug("Stored %d bytes at %s", len(content), path)
        return f"memory://{path}"

    async def delete(self, path: str) -> None:
        self.objects.pop(path, None)
