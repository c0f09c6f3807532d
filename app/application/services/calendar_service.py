"""Calendar service: turns tasks into calendar events.

Each task becomes a one-hour block starting at its due time, titled with the
responsible user's name and coloured by status. Days are capped at
MAX_TASKS_PER_DAY task events (grouped by UTC calendar date). Sequential tasks
also contribute one block per assignee window.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from app.application.dtos.calendar import CalendarEvent
from app.domain.entities.task import TaskEntity
from app.domain.entities.user import UserEntity
from app.domain.enums import TaskStatus

MAX_TASKS_PER_DAY = 10
EVENT_DURATION = timedelta(hours=1)

STATUS_COLORS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "#b36dae",
    TaskStatus.IN_PROGRESS: "#fd6f28",
    TaskStatus.DONE: "#63b842",
    TaskStatus.OVERDUE: "#f37021",
}
DEFAULT_COLOR = "#63b842"
WINDOW_COLOR_DONE = "#63b842"
WINDOW_COLOR_OPEN = "#f9e840"


class CalendarService:
    """Build calendar events from a task snapshot."""

    def build_events(
        self,
        tasks: Sequence[TaskEntity],
        users: Iterable[UserEntity],
        user_filter: str | None = None,
        dept_filter: str | None = None,
        sort_by_person: bool = False,
        include_windows: bool = True,
    ) -> list[CalendarEvent]:
        """Return task events (and sequential windows) for the calendar view.

        Args:
            tasks: Task snapshot.
            users: Used to resolve responsible/assignee display names.
            user_filter: Keep only tasks whose responsible is this user id.
            dept_filter: Keep only tasks of this department.
            sort_by_person: Order by responsible name before applying the daily cap.
            include_windows: Add one event per sequential assignee window.
        """
        names = {u.id: u.name for u in users}
        selected = [
            t
            for t in tasks
            if (not user_filter or t.responsible == user_filter)
            and (not dept_filter or t.dept == dept_filter)
        ]
        if sort_by_person:
            selected.sort(key=lambda t: names.get(t.responsible, ""))

        per_day: dict[date, int] = {}
        events: list[CalendarEvent] = []
        for task in selected:
            day = task.due.date()
            if per_day.get(day, 0) >= MAX_TASKS_PER_DAY:
                continue
            per_day[day] = per_day.get(day, 0) + 1
            events.append(self._task_event(task, names))
            if include_windows and task.is_sequential:
                events.extend(self._window_events(task, names))
        return events

    def _task_event(self, task: TaskEntity, names: dict[str, str]) -> CalendarEvent:
        responsible_name = names.get(task.responsible, "")
        return CalendarEvent(
            id=task.id,
            task_id=task.id,
            title=f"{task.title} - {responsible_name}",
            start=task.due,
            end=task.due + EVENT_DURATION,
            color=STATUS_COLORS.get(task.status, DEFAULT_COLOR),
            status=task.status.value,
            priority=task.priority.value,
            dept=task.dept,
            user_id=task.responsible,
            user_name=responsible_name,
        )

    def _window_events(self, task: TaskEntity, names: dict[str, str]) -> list[CalendarEvent]:
        events: list[CalendarEvent] = []
        for index, assignee in enumerate(task.assignees):
            if assignee.start_time is None or assignee.end_time is None:
                continue
            name = names.get(assignee.user_id, "")
            events.append(
                CalendarEvent(
                    id=f"{task.id}-{index}",
                    task_id=task.id,
                    title=f"{task.title} ({index + 1}/{len(task.assignees)}) - {name}",
                    start=assignee.start_time,
                    end=assignee.end_time,
                    color=WINDOW_COLOR_DONE if assignee.is_completed else WINDOW_COLOR_OPEN,
                    status=task.status.value,
                    priority=task.priority.value,
                    dept=task.dept,
                    user_id=assignee.user_id,
                    user_name=name,
                    kind="window",
                )
            )
        return events
