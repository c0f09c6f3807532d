"""ReminderService tests: due-soon reminders and the optional overdue sweep."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.services.notification_service import NotificationService
from app.application.services.reminder_service import ReminderService
from app.domain.enums import NotificationType, TaskStatus
from app.infrastructure.backend import build_memory_backend
from tests.factories import make_task

NOW = datetime(2024, 1, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
async def backend():
    backend = build_memory_backend()
    await backend.tasks.create(make_task("soon", due=NOW + timedelta(minutes=20)))
    await backend.tasks.create(make_task("edge", due=NOW + timedelta(minutes=30)))
    await backend.tasks.create(make_task("later", due=NOW + timedelta(minutes=31)))
    await backend.tasks.create(
        make_task("done", due=NOW + timedelta(minutes=10), status=TaskStatus.DONE)
    )
    await backend.tasks.create(make_task("past", due=NOW - timedelta(minutes=5)))
    return backend


def _service(backend, **kwargs) -> ReminderService:
    return ReminderService(backend.tasks, NotificationService(backend.notifications), **kwargs)


async def test_reminds_unfinished_tasks_in_window_once(backend) -> None:
    service = _service(backend)
    result = await service.check_due_tasks(NOW)
    assert sorted(result.reminded) == ["edge", "soon"]
    assert (await backend.tasks.get_by_id("soon")).reminder_sent is True

    again = await service.check_due_tasks(NOW)
    assert again.reminded == []
    reminders = await backend.notifications.list_for_user("u1")
    assert [n.type for n in reminders] == [NotificationType.REMINDER] * 2


async def test_failure_on_one_task_does_not_stop_sweep(backend) -> None:
    notifications = NotificationService(backend.notifications)
    real = notifications.notify_reminder

    async def flaky(task, minutes):
        if task.id == "soon":
            raise RuntimeError("write failed")
        return await real(task, minutes)

    notifications.notify_reminder = AsyncMock(side_effect=flaky)
    service = ReminderService(backend.tasks, notifications)
    result = await service.check_due_tasks(NOW)
    assert result.failed == ["soon"]
    assert result.reminded == ["edge"]
    assert (await backend.tasks.get_by_id("soon")).reminder_sent is False


async def test_overdue_sweep_is_opt_in(backend) -> None:
    result = await _service(backend).check_due_tasks(NOW)
    assert result.marked_overdue == []
    assert (await backend.tasks.get_by_id("past")).status == TaskStatus.TODO

    result = await _service(backend, auto_overdue=True).check_due_tasks(NOW)
    assert result.marked_overdue == ["past"]
    assert (await backend.tasks.get_by_id("past")).status == TaskStatus.OVERDUE


async def test_run_forever_stops_on_cancel(backend) -> None:
    service = _service(backend)
    service.check_due_tasks = AsyncMock(side_effect=RuntimeError("boom"))
    task = asyncio.create_task(service.run_forever(0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert service.check_due_tasks.await_count >= 2


async def test_mark_overdue_skips_finished_and_already_overdue(backend) -> None:
    await backend.tasks.create(
        make_task("old-done", due=NOW - timedelta(days=1), status=TaskStatus.DONE)
    )
    await backend.tasks.create(
        make_task("old-overdue", due=NOW - timedelta(days=1), status=TaskStatus.OVERDUE)
    )
    service = _service(backend)

    assert await service.mark_overdue(NOW) == ["past"]
    assert await service.mark_overdue(NOW) == []
