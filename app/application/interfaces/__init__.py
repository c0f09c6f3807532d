"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IDepartmentRepository,
    INotificationRepository,
    ITaskRepository,
    ITaskTemplateRepository,
    IUserRepository,
    SnapshotCallback,
    Subscription,
)
from app.application.interfaces.services import IBlobStore, IIdentityProvider

__all__ = [
    "IBlobStore",
    "IDepartmentRepository",
    "IIdentityProvider",
    "INotificationRepository",
    "ITaskRepository",
    "ITaskTemplateRepository",
    "IUserRepository",
    "SnapshotCallback",
    "Subscription",
]
