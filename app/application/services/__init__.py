"""Application services: authorization, sequential scheduling, notifications, reports."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.calendar_service import CalendarService
from app.application.services.notification_service import NotificationService
from app.application.services.reminder_service import ReminderService, SweepResult
from app.application.services.report_service import ReportService
from app.application.services.sequential_scheduler import (
    BlockStatus,
    CompletionChange,
    GateResult,
    calculate_sequential_deadlines,
    check_gate,
)

__all__ = [
    "AuthorizationService",
    "BlockStatus",
    "CalendarService",
    "CompletionChange",
    "GateResult",
    "NotificationService",
    "ReminderService",
    "ReportService",
    "SweepResult",
    "calculate_sequential_deadlines",
    "check_gate",
]
