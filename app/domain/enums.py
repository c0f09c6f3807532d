"""Domain enumerations for the task dashboard.

Enums represent fixed sets of domain values. Values match the strings stored
in the backing store so documents written by other clients stay readable.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task lifecycle status.

    Transitions are free-form for regular tasks; sequential tasks derive their
    status from assignee completion (see sequential_scheduler.derive_task_status).
    """

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    OVERDUE = "Overdue"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @classmethod
    def from_store(cls, raw: str | None) -> "TaskStatus":
        """Parse a stored status; unknown or empty values fall back to TODO."""
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class TaskPriority(str, Enum):
    """Task priority. Also drives the default deadline when none is given."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @classmethod
    def values(cls) -> list[str]:
        return [priority.value for priority in cls]

    @classmethod
    def from_store(cls, raw: str | None) -> "TaskPriority":
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


class NotificationType(str, Enum):
    """Notification type tag shown as an icon/filter in the notification center."""

    REMINDER = "reminder"
    APPROVAL = "approval"
    COMPLETION = "completion"
    ASSIGNMENT = "assignment"
    FEEDBACK = "feedback"
    MENTION = "mention"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class RecurringFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class BadgeCriteria(str, Enum):
    TASK_COUNT = "taskCount"
    PERFORMANCE = "performance"
    STREAK = "streak"
    CUSTOM = "custom"


class GateState(str, Enum):
    """Outcome of a sequential gating check for one user on one task.

    NOT_APPLICABLE covers non-sequential tasks. INVALID_ASSIGNEE and
    EMPTY_LIST surface inputs the legacy checks silently treated as unblocked.
    """

    UNBLOCKED = "unblocked"
    BLOCKED = "blocked"
    NOT_APPLICABLE = "not_applicable"
    INVALID_ASSIGNEE = "invalid_assignee"
    EMPTY_LIST = "empty_list"


class Permission(str, Enum):
    """Permission names carried on the user profile. ADMIN acts as a wildcard."""

    ADMIN = "admin"
    MANAGE_USERS = "manage_users"
    MANAGE_DEPARTMENTS = "manage_departments"
    MANAGE_TASKS = "manage_tasks"
    CREATE_TASKS = "create_tasks"
    APPROVE_TASKS = "approve_tasks"
    UPDATE_TASKS = "update_tasks"
    VIEW_TASKS = "view_tasks"
    VIEW_REPORTS = "view_reports"
