"""NotificationService tests: localized texts, filters and read state."""

from datetime import UTC, datetime

import pytest

from app.application.services.notification_service import NotificationService
from app.domain.enums import NotificationPriority, NotificationType
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.infrastructure.memory import InMemoryNotificationRepository, InMemoryStore
from tests.factories import make_task


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def service(store: InMemoryStore) -> NotificationService:
    return NotificationService(InMemoryNotificationRepository(store))


async def test_assignment_notification_targets_responsible(service: NotificationService) -> None:
    task = make_task(responsible="u1", title="Clean the grill")
    notification = await service.notify_assignment(task)
    assert notification.user_id == "u1"
    assert notification.type == NotificationType.ASSIGNMENT
    assert notification.title == "New task assigned"
    assert '"Clean the grill"' in notification.message
    assert notification.action_url == f"/tasks/{task.id}"
    assert notification.is_read is False


async def test_approval_request_is_high_priority(service: NotificationService) -> None:
    notification = await service.notify_approval_request(make_task(accountable="boss"))
    assert notification.user_id == "boss"
    assert notification.priority == NotificationPriority.HIGH


async def test_reminder_mentions_window(service: NotificationService) -> None:
    notification = await service.notify_reminder(make_task(), 30)
    assert "30 minutes" in notification.message


async def test_filters(service: NotificationService) -> None:
    task = make_task()
    await service.notify_assignment(task)
    reminder = await service.notify_reminder(task, 30)
    await service.mark_read("u1", reminder.id)

    assert len(await service.list_for_user("u1")) == 2
    unread = await service.list_for_user("u1", "unread")
    assert [n.type for n in unread] == [NotificationType.ASSIGNMENT]
    reminders = await service.list_for_user("u1", "reminder")
    assert [n.id for n in reminders] == [reminder.id]
    assert await service.list_for_user("u1", "mention") == []
    assert await service.unread_count("u1") == 1


async def test_mark_read_is_idempotent(service: NotificationService) -> None:
    notification = await service.notify_assignment(make_task())
    first = await service.mark_read("u1", notification.id)
    second = await service.mark_read("u1", notification.id)
    assert first.is_read and second.is_read
    assert second.read_at == first.read_at


async def test_mark_read_rejects_other_users(service: NotificationService) -> None:
    notification = await service.notify_assignment(make_task())
    with pytest.raises(AuthorizationException):
        await service.mark_read("someone-else", notification.id)
    with pytest.raises(ResourceNotFoundException):
        await service.mark_read("u1", "missing")


async def test_mark_all_read_uses_one_batch(service: NotificationService, store: InMemoryStore) -> None:
    task = make_task()
    for _ in range(3):
        await service.notify_assignment(task)
    await service.notify_assignment(make_task(responsible="u2"))

    assert await service.mark_all_read("u1") == 3
    assert store.batch_commits == 1
    assert await service.unread_count("u1") == 0
    assert await service.unread_count("u2") == 1
    assert await service.mark_all_read("u1") == 0


async def test_vietnamese_texts(service: NotificationService, monkeypatch) -> None:
    from app.core.config import get_settings

    monkeypatch.setattr(get_settings(), "locale", "vi")
    notification = await service.notify_assignment(make_task(title="Rửa bát"))
    assert notification.title == "Công việc mới được giao"
    assert notification.message == 'Bạn đã được giao công việc "Rửa bát".'


def test_notification_entity_mark_read_keeps_first_time() -> None:
    from app.domain.entities.notification import NotificationEntity

    first = datetime(2024, 1, 1, tzinfo=UTC)
    n = NotificationEntity("n1", "u1", "t", "m", NotificationType.SYSTEM, created_at=first)
    n.mark_read(first)
    n.mark_read(datetime(2024, 2, 1, tzinfo=UTC))
    assert n.read_at == first
