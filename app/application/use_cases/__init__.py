"""Application use cases: one entry point per workflow."""

from app.application.use_cases.directory import DirectoryService
from app.application.use_cases.session import SessionService
from app.application.use_cases.tasks import TaskService

__all__ = [
    "DirectoryService",
    "SessionService",
    "TaskService",
]
