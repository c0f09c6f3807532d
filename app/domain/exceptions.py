"""Domain exceptions for the task dashboard.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DashboardException(Exception):
    """Base exception for all dashboard application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DashboardException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DashboardException):
    """Raised when authentication fails (e.g. invalid credentials or token).

    provider_code keeps the identity provider's raw code (e.g.
    INVALID_PASSWORD) so callers can log it; message is already localized.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        provider_code: str | None = None,
    ) -> None:
        details = {"provider_code": provider_code} if provider_code else {}
        super().__init__(message, "AUTHENTICATION_ERROR", details)


class AuthorizationException(DashboardException):
    """Raised when the user lacks the permission required for the operation."""

    def __init__(
        self,
        permission: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with the missing permission name.

        Args:
            permission: Permission that was required (e.g. 'approve_tasks').
            message: Human-readable message; default used when permission omitted.
        """
        details: dict[str, Any] = {}
        if permission:
            message = f"Permission denied: {permission} required"
            details["permission"] = permission
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(DashboardException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class EmptyAssigneeListException(DashboardException):
    """Raised when a sequential computation receives no assignees."""

    def __init__(self, task_id: str | None = None) -> None:
        details = {"task_id": task_id} if task_id else {}
        super().__init__(
            "Sequential task requires at least one assignee",
            "EMPTY_ASSIGNEE_LIST",
            details,
        )


class TaskBlockedException(DashboardException):
    """Raised when a user acts on a sequential task before their predecessors finish."""

    def __init__(self, task_id: str, user_id: str, blocked_by: str | None) -> None:
        super().__init__(
            f"Task {task_id} is waiting on {blocked_by or 'a previous assignee'}",
            "TASK_BLOCKED",
            {"task_id": task_id, "user_id": user_id, "blocked_by": blocked_by},
        )


class BackingStoreException(DashboardException):
    """Raised when the backing store (Firestore, Storage, Identity Toolkit) call fails.

    State is left unchanged; the caller surfaces the message and does not retry.
    """

    def __init__(self, operation: str, reason: str | None = None) -> None:
        details: dict[str, Any] = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Backing store operation failed: {operation}",
            "BACKING_STORE_ERROR",
            details,
        )
