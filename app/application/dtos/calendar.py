"""Calendar read-models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CalendarEvent:
    """One block on the calendar: a task at its due time or a sequential window."""

    id: str
    task_id: str
    title: str
    start: datetime
    end: datetime
    color: str
    status: str
    priority: str
    dept: str
    user_id: str
    user_name: str
    kind: str = "task"
