"""Firestore-backed repository implementations (swappable with the in-memory ones)."""

from app.infrastructure.firebase.repositories.notification_repo_firestore import (
    FirestoreNotificationRepository,
    FirestoreTaskTemplateRepository,
)
from app.infrastructure.firebase.repositories.task_repo_firestore import (
    FirestoreTaskRepository,
)
from app.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreDepartmentRepository,
    FirestoreUserRepository,
)

__all__ = [
    "FirestoreDepartmentRepository",
    "FirestoreNotificationRepository",
    "FirestoreTaskRepository",
    "FirestoreTaskTemplateRepository",
    "FirestoreUserRepository",
]
