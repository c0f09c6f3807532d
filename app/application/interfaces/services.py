"""Service interfaces (ports) for the application layer.

Protocols define contracts for external services the application calls (DIP):
the identity provider (email/password sign-in) and the blob store (attachments).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.session import Identity


# Identity provider interface
class IIdentityProvider(Protocol):
    """Protocol for the hosted identity provider (Firebase Authentication)."""

    async def sign_in(self, email: str, password: str) -> Identity:
        """Verify credentials and return the provider identity.

        Raises AuthenticationException with a localized message on failure.
        """

    async def sign_out(self, identity: Identity) -> None:
        """Revoke or forget the provider session. Idempotent."""


# Blob store interface
class IBlobStore(Protocol):
    """Protocol for attachment storage (Cloud Storage)."""

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store content at path and return a download URL."""

    async def delete(self, path: str) -> None:
        """Remove the object at path. Missing objects are ignored."""
