"""Tests for domain exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BackingStoreException,
    DashboardException,
    EmptyAssigneeListException,
    ResourceNotFoundException,
    TaskBlockedException,
    ValidationException,
)


def test_dashboard_exception_default_error_code() -> None:
    """Base DashboardException uses class name as error_code when not provided."""
    exc = DashboardException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "DashboardException"
    assert exc.details == {}


def test_to_dict() -> None:
    exc = DashboardException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}
    assert ValidationException("No field").details == {}


def test_authentication_exception_keeps_provider_code() -> None:
    exc = AuthenticationException("Incorrect password.", provider_code="INVALID_PASSWORD")
    assert exc.error_code == "AUTHENTICATION_ERROR"
    assert exc.details == {"provider_code": "INVALID_PASSWORD"}


def test_authorization_exception_names_permission() -> None:
    exc = AuthorizationException(permission="approve_tasks")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: approve_tasks required"
    assert AuthorizationException(message="Nope").message == "Nope"


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("task", "t1")
    assert exc.message == "task not found: t1"
    assert exc.details == {"resource_type": "task", "resource_id": "t1"}


def test_sequencing_errors() -> None:
    assert EmptyAssigneeListException().error_code == "EMPTY_ASSIGNEE_LIST"
    blocked = TaskBlockedException("t1", "u2", "Alice")
    assert blocked.error_code == "TASK_BLOCKED"
    assert "Alice" in blocked.message
    assert "a previous assignee" in TaskBlockedException("t1", "u2", None).message


def test_backing_store_exception() -> None:
    exc = BackingStoreException("tasks.update", "HTTP 500")
    assert exc.error_code == "BACKING_STORE_ERROR"
    assert exc.details == {"operation": "tasks.update", "reason": "HTTP 500"}
