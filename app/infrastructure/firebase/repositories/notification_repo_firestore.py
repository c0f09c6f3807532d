"""Firestore-backed notification and template repositories."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.application.interfaces.repositories import SnapshotCallback
from app.domain.entities.notification import NotificationEntity
from app.domain.entities.template import TaskTemplateEntity
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.firebase.collections import (
    COLLECTION_NOTIFICATIONS,
    COLLECTION_TASK_TEMPLATES,
)
from app.infrastructure.firebase.mappers import (
    NOTIFICATION_FIELDS,
    TEMPLATE_FIELDS,
    notification_from_doc,
    notification_to_doc,
    template_from_doc,
    template_to_doc,
)
from app.infrastructure.firebase.repositories._base import FirestoreRepository
from app.infrastructure.firebase.subscriptions import PollingSubscription

logger = logging.getLogger(__name__)


class FirestoreNotificationRepository(FirestoreRepository[NotificationEntity]):
    collection_name = COLLECTION_NOTIFICATIONS
    resource = "notification"
    field_map = NOTIFICATION_FIELDS

    def _to_doc(self, entity: NotificationEntity) -> dict[str, Any]:
        return notification_to_doc(entity)

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> NotificationEntity:
        return notification_from_doc(doc_id, data)

    async def list_for_user(self, user_id: str) -> list[NotificationEntity]:
        items = await self._collect(self._coll.where("userId", "==", user_id))
        return sorted(items, key=lambda n: (n.created_at, n.id), reverse=True)

    async def mark_read(self, notification_id: str, read_at: datetime) -> None:
        updated = await self._coll.document(notification_id).update(
            {"isRead": True, "readAt": read_at}
        )
        if not updated:
            raise ResourceNotFoundException(self.resource, notification_id)

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        """Mark unread notifications of user_id read in a single commit."""
        query = self._coll.where("userId", "==", user_id).where("isRead", "==", False)
        batch = self._client.batch()
        async for snapshot in query.stream():
            batch.update(
                self._coll.document(snapshot.id), {"isRead": True, "readAt": read_at}
            )
        count = await batch.commit()
        logger.debug("Marked %d notifications read for %s", count, user_id)
        return count

    def subscribe(self, user_id: str, callback: SnapshotCallback) -> PollingSubscription:
        return PollingSubscription(
            lambda: self.list_for_user(user_id),
            callback,
            self._poll_interval,
            name=f"{COLLECTION_NOTIFICATIONS}:{user_id}",
        )


class FirestoreTaskTemplateRepository(FirestoreRepository[TaskTemplateEntity]):
    collection_name = COLLECTION_TASK_TEMPLATES
    resource = "template"
    field_map = TEMPLATE_FIELDS

    def _to_doc(self, entity: TaskTemplateEntity) -> dict[str, Any]:
        return template_to_doc(entity)

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> TaskTemplateEntity:
        return template_from_doc(doc_id, data)

    async def list_templates(self) -> list[TaskTemplateEntity]:
        return sorted(await self._collect(self._coll), key=lambda t: t.name)
