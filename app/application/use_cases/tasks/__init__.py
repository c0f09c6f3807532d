"""Task use cases."""

from app.application.use_cases.tasks.task_operations import TaskService, matches_filter

__all__ = ["TaskService", "matches_filter"]
