"""Reminder sweep: notify responsible users of tasks due soon.

Runs as a background asyncio task started in the app lifespan. Each task is
processed on its own; a failure on one task is logged and the sweep continues.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from app.application.interfaces.repositories import ITaskRepository
from app.application.services.notification_service import NotificationService
from app.domain.enums import TaskStatus
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Counts from one sweep (ids of tasks touched, and failures)."""

    reminded: list[str] = field(default_factory=list)
    marked_overdue: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class ReminderService:
    """Periodic due-soon reminders and optional Overdue derivation."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        notification_service: NotificationService,
        window_minutes: int = 30,
        auto_overdue: bool = False,
    ) -> None:
        self._task_repo = task_repo
        self._notifications = notification_service
        self._window = timedelta(minutes=window_minutes)
        self._window_minutes = window_minutes
        self._auto_overdue = auto_overdue

    async def check_due_tasks(self, now: datetime | None = None) -> SweepResult:
        """Send one reminder per unfinished task due in (now, now + window].

        The reminder_sent flag is set after the notification is written, so a
        task is reminded at most once unless the flag write fails.
        """
        now = now or utc_now()
        result = SweepResult()
        candidates = await self._task_repo.list_due_between(now, now + self._window)
        for task in candidates:
            if task.status == TaskStatus.DONE or task.reminder_sent:
                continue
            try:
                await self._notifications.notify_reminder(task, self._window_minutes)
                await self._task_repo.update(replace(task, reminder_sent=True), {"reminder_sent"})
                result.reminded.append(task.id)
            except Exception:
                logger.exception("Reminder failed for task %s", task.id)
                result.failed.append(task.id)
        if self._auto_overdue:
            overdue = await self.mark_overdue(now)
            result.marked_overdue.extend(overdue)
        return result

    async def mark_overdue(self, now: datetime | None = None) -> list[str]:
        """Set status Overdue on every unfinished task whose due time has passed."""
        now = now or utc_now()
        marked: list[str] = []
        for task in await self._task_repo.list_tasks():
            if task.status in (TaskStatus.DONE, TaskStatus.OVERDUE) or task.due >= now:
                continue
            try:
                await self._task_repo.update(replace(task, status=TaskStatus.OVERDUE), {"status"})
                marked.append(task.id)
            except Exception:
                logger.exception("Marking task %s overdue failed", task.id)
        if marked:
            logger.info("Marked %d tasks overdue", len(marked))
        return marked

    async def run_forever(self, interval_seconds: float = 60) -> None:
        """Sweep immediately, then every interval_seconds until cancelled."""
        logger.info("Reminder sweep started (every %ss)", interval_seconds)
        while True:
            try:
                result = await self.check_due_tasks()
                if result.reminded:
                    logger.info("Sent %d due-soon reminders", len(result.reminded))
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Reminder sweep failed")
            await asyncio.sleep(interval_seconds)
