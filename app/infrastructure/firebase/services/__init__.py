"""Firebase-backed services: Authentication and Cloud Storage."""

from app.infrastructure.firebase.services.identity import FirebaseIdentityProvider
from app.infrastructure.firebase.services.storage import FirebaseBlobStore

__all__ = ["FirebaseBlobStore", "FirebaseIdentityProvider"]
