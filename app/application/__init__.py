"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, identity, storage).
"""

from app.application.interfaces import (
    IBlobStore,
    IDepartmentRepository,
    IIdentityProvider,
    INotificationRepository,
    ITaskRepository,
    ITaskTemplateRepository,
    IUserRepository,
)
from app.application.services.authorization_service import AuthorizationService
from app.application.use_cases.directory import DirectoryService
from app.application.use_cases.session import SessionService
from app.application.use_cases.tasks import TaskService

__all__ = [
    "AuthorizationService",
    "DirectoryService",
    "IBlobStore",
    "IDepartmentRepository",
    "IIdentityProvider",
    "INotificationRepository",
    "ITaskRepository",
    "ITaskTemplateRepository",
    "IUserRepository",
    "SessionService",
    "TaskService",
]
