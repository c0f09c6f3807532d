"""Backend selection: builds repositories and services for the configured store.

'memory' keeps everything in process (development and tests). 'firestore'
talks to Firestore, Firebase Authentication and Cloud Storage over REST.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from app.application.interfaces import (
    IBlobStore,
    IDepartmentRepository,
    IIdentityProvider,
    INotificationRepository,
    ITaskRepository,
    ITaskTemplateRepository,
    IUserRepository,
)
from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """Everything the composition root needs from infrastructure."""

    name: str
    tasks: ITaskRepository
    users: IUserRepository
    departments: IDepartmentRepository
    notifications: INotificationRepository
    templates: ITaskTemplateRepository
    identity: IIdentityProvider
    blobs: IBlobStore | None = None
    _closers: list[Any] = field(default_factory=list)

    async def aclose(self) -> None:
        for closer in self._closers:
            await closer()
        self._closers.clear()


def build_memory_backend() -> Backend:
    from app.infrastructure.memory import (
        InMemoryBlobStore,
        InMemoryDepartmentRepository,
        InMemoryIdentityProvider,
        InMemoryNotificationRepository,
        InMemoryStore,
        InMemoryTaskRepository,
        InMemoryTaskTemplateRepository,
        InMemoryUserRepository,
    )

    store = InMemoryStore()
    return Backend(
        name="memory",
        tasks=InMemoryTaskRepository(store),
        users=InMemoryUserRepository(store),
        departments=InMemoryDepartmentRepository(store),
        notifications=InMemoryNotificationRepository(store),
        templates=InMemoryTaskTemplateRepository(store),
        identity=InMemoryIdentityProvider(),
        blobs=InMemoryBlobStore(),
    )


def build_firestore_backend(settings: Settings) -> Backend:
    """Build the Firebase backend.

    Raises:
        RuntimeError: If the Firestore client cannot be initialized or no
            web API key is configured for sign-in.
    """
    from app.infrastructure.firebase import close_firebase, get_firestore_client, init_firebase
    from app.infrastructure.firebase.repositories import (
        FirestoreDepartmentRepository,
        FirestoreNotificationRepository,
        FirestoreTaskRepository,
        FirestoreTaskTemplateRepository,
        FirestoreUserRepository,
    )
    from app.infrastructure.firebase.services import FirebaseBlobStore, FirebaseIdentityProvider

    if not init_firebase():
        raise RuntimeError("Firestore could not be initialized; check Firebase credentials")
    if settings.firebase_web_api_key is None:
        raise RuntimeError("FIREBASE_WEB_API_KEY is required for the firestore backend")
    client = get_firestore_client()
    interval = settings.firestore_poll_interval_seconds
    identity = FirebaseIdentityProvider(settings.firebase_web_api_key.get_secret_value())
    blobs = (
        FirebaseBlobStore(client, settings.firebase_storage_bucket)
        if settings.firebase_storage_bucket
        else None
    )
    if blobs is None:
        logger.warning("FIREBASE_STORAGE_BUCKET not set; attachment uploads are disabled")
    return Backend(
        name="firestore",
        tasks=FirestoreTaskRepository(client, interval),
        users=FirestoreUserRepository(client, interval),
        departments=FirestoreDepartmentRepository(client, interval),
        notifications=FirestoreNotificationRepository(client, interval),
        templates=FirestoreTaskTemplateRepository(client, interval),
        identity=identity,
        blobs=blobs,
        _closers=[identity.aclose, close_firebase],
    )


def build_backend(settings: Settings) -> Backend:
    if settings.database_backend == "memory":
        return build_memory_backend()
    return build_firestore_backend(settings)
