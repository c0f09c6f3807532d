"""Firestore-backed task repository (implements ITaskRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.interfaces.repositories import SnapshotCallback
from app.domain.entities.task import TaskEntity
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.firebase.collections import COLLECTION_TASKS
from app.infrastructure.firebase.mappers import TASK_FIELDS, task_from_doc, task_to_doc
from app.infrastructure.firebase.repositories._base import FirestoreRepository
from app.infrastructure.firebase.subscriptions import PollingSubscription
from app.shared.utils.datetime import to_iso_z


def _newest_first(tasks: list[TaskEntity]) -> list[TaskEntity]:
    return sorted(tasks, key=lambda t: (t.created, t.id), reverse=True)


class FirestoreTaskRepository(FirestoreRepository[TaskEntity]):
    collection_name = COLLECTION_TASKS
    resource = "task"
    field_map = TASK_FIELDS

    def _to_doc(self, entity: TaskEntity) -> dict[str, Any]:
        return task_to_doc(entity)

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> TaskEntity:
        return task_from_doc(doc_id, data)

    async def list_tasks(
        self,
        *,
        dept: str | None = None,
        status: str | None = None,
        responsible: str | None = None,
    ) -> list[TaskEntity]:
        """Equality filters run server-side; ordering is done here to avoid composite indexes."""
        filters = [
            (field, value)
            for field, value in (("dept", dept), ("status", status), ("responsible", responsible))
            if value is not None
        ]
        if not filters:
            return _newest_first(await self._collect(self._coll))
        query = self._coll.where(filters[0][0], "==", filters[0][1])
        for field, value in filters[1:]:
            query = query.where(field, "==", value)
        return _newest_first(await self._collect(query))

    async def list_page(
        self, limit: int, cursor: str | None = None
    ) -> tuple[list[TaskEntity], bool]:
        query = self._coll.order_by("created", "DESCENDING").limit(limit + 1)
        if cursor is not None:
            anchor = await self.get_by_id(cursor)
            if anchor is None:
                raise ResourceNotFoundException("task", cursor)
            query = query.start_after(to_iso_z(anchor.created))
        tasks = await self._collect(query)
        return tasks[:limit], len(tasks) > limit

    async def list_due_between(self, start: datetime, end: datetime) -> list[TaskEntity]:
        query = (
            self._coll.where("due", ">", to_iso_z(start))
            .where("due", "<=", to_iso_z(end))
            .order_by("due")
        )
        return await self._collect(query)

    def subscribe(self, callback: SnapshotCallback) -> PollingSubscription:
        return PollingSubscription(
            self.list_tasks, callback, self._poll_interval, name=COLLECTION_TASKS
        )
