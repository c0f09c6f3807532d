"""Notification service: creates task notifications and manages read state.

Texts are localized through app.shared.messages. Every notify_* helper writes
exactly one notification; callers decide when an event warrants one.
"""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import INotificationRepository
from app.domain.entities.notification import NotificationEntity
from app.domain.entities.task import TaskEntity
from app.domain.enums import NotificationPriority, NotificationType
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.shared.messages import translate
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

# Filter values accepted by list_for_user besides the notification types.
FILTER_ALL = "all"
FILTER_UNREAD = "unread"


class NotificationService:
    """Write and read per-user notifications."""

    def __init__(self, notification_repo: INotificationRepository) -> None:
        self._repo = notification_repo

    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        type_: NotificationType,
        task_id: str | None = None,
        priority: NotificationPriority | None = None,
    ) -> NotificationEntity:
        """Create and persist one unread notification."""
        notification = NotificationEntity(
            id=generate_cuid(),
            user_id=user_id,
            title=title,
            message=message,
            type=type_,
            created_at=utc_now(),
            task_id=task_id,
            priority=priority,
            action_url=f"/tasks/{task_id}" if task_id else None,
        )
        created = await self._repo.create(notification)
        logger.debug("Notification %s (%s) -> %s", created.id, type_.value, user_id)
        return created

    async def notify_assignment(self, task: TaskEntity) -> NotificationEntity:
        """Tell the responsible user a task was assigned to them."""
        return await self.notify(
            task.responsible,
            translate("notify.assignment.title"),
            translate("notify.assignment.body", title=task.title),
            NotificationType.ASSIGNMENT,
            task_id=task.id,
        )

    async def notify_next_assignee(self, task: TaskEntity, user_id: str) -> NotificationEntity:
        """Tell a sequential assignee their predecessor finished."""
        return await self.notify(
            user_id,
            translate("notify.next.title"),
            translate("notify.next.body", title=task.title),
            NotificationType.ASSIGNMENT,
            task_id=task.id,
        )

    async def notify_approval_request(self, task: TaskEntity) -> NotificationEntity:
        """Ask the accountable user to approve a finished task."""
        return await self.notify(
            task.accountable,
            translate("notify.approval.title"),
            translate("notify.approval.body", title=task.title),
            NotificationType.APPROVAL,
            task_id=task.id,
            priority=NotificationPriority.HIGH,
        )

    async def notify_approved(self, task: TaskEntity, approver_name: str) -> NotificationEntity:
        return await self.notify(
            task.responsible,
            translate("notify.completion.title"),
            translate("notify.completion.body", title=task.title, approver=approver_name),
            NotificationType.COMPLETION,
            task_id=task.id,
        )

    async def notify_reminder(self, task: TaskEntity, minutes: int) -> NotificationEntity:
        return await self.notify(
            task.responsible,
            translate("notify.reminder.title"),
            translate("notify.reminder.body", title=task.title, minutes=minutes),
            NotificationType.REMINDER,
            task_id=task.id,
            priority=NotificationPriority.HIGH,
        )

    async def notify_feedback(
        self, task: TaskEntity, author_name: str, rating: int
    ) -> NotificationEntity:
        return await self.notify(
            task.responsible,
            translate("notify.feedback.title"),
            translate(
                "notify.feedback.body", author=author_name, title=task.title, rating=rating
            ),
            NotificationType.FEEDBACK,
            task_id=task.id,
        )

    async def notify_mention(
        self, task: TaskEntity, user_id: str, author_name: str
    ) -> NotificationEntity:
        return await self.notify(
            user_id,
            translate("notify.mention.title"),
            translate("notify.mention.body", author=author_name, title=task.title),
            NotificationType.MENTION,
            task_id=task.id,
        )

    async def list_for_user(
        self, user_id: str, filter_: str = FILTER_ALL
    ) -> list[NotificationEntity]:
        """Return the user's notifications newest first.

        Args:
            user_id: Recipient.
            filter_: 'all', 'unread', or a NotificationType value.
        """
        notifications = await self._repo.list_for_user(user_id)
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        if filter_ == FILTER_ALL:
            return notifications
        if filter_ == FILTER_UNREAD:
            return [n for n in notifications if not n.is_read]
        return [n for n in notifications if n.type.value == filter_]

    async def unread_count(self, user_id: str) -> int:
        notifications = await self._repo.list_for_user(user_id)
        return sum(1 for n in notifications if not n.is_read)

    async def mark_read(self, user_id: str, notification_id: str) -> NotificationEntity:
        """Mark one of the user's notifications read. Idempotent.

        Raises:
            ResourceNotFoundException: Notification does not exist.
            AuthorizationException: Notification belongs to another user.
        """
        notification = await self._repo.get_by_id(notification_id)
        if notification is None:
            raise ResourceNotFoundException("notification", notification_id)
        if notification.user_id != user_id:
            raise AuthorizationException(message="Notification belongs to another user")
        if notification.is_read:
            return notification
        notification.mark_read(utc_now())
        await self._repo.mark_read(notification_id, notification.read_at)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of the user read in one batch; return count."""
        count = await self._repo.mark_all_read(user_id, utc_now())
        logger.info("Marked %d notifications read for %s", count, user_id)
        return count
