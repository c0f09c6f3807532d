"""In-memory backend (local development and tests)."""

from app.infrastructure.memory.repositories import (
    InMemoryDepartmentRepository,
    InMemoryNotificationRepository,
    InMemoryTaskRepository,
    InMemoryTaskTemplateRepository,
    InMemoryUserRepository,
)
from app.infrastructure.memory.services import InMemoryBlobStore, InMemoryIdentityProvider
from app.infrastructure.memory.store import InMemoryStore, MemorySubscription

__all__ = [
    "InMemoryBlobStore",
    "InMemoryDepartmentRepository",
    "InMemoryIdentityProvider",
    "InMemoryNotificationRepository",
    "InMemoryStore",
    "InMemoryTaskRepository",
    "InMemoryTaskTemplateRepository",
    "InMemoryUserRepository",
    "MemorySubscription",
]
