"""Firestore-backed user and department repositories."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.repositories import SnapshotCallback
from app.domain.entities.user import DepartmentEntity, UserEntity
from app.infrastructure.firebase.collections import COLLECTION_DEPARTMENTS, COLLECTION_USERS
from app.infrastructure.firebase.mappers import (
    DEPARTMENT_FIELDS,
    USER_FIELDS,
    department_from_doc,
    department_to_doc,
    user_from_doc,
    user_to_doc,
)
from app.infrastructure.firebase.repositories._base import FirestoreRepository
from app.infrastructure.firebase.subscriptions import PollingSubscription


class FirestoreUserRepository(FirestoreRepository[UserEntity]):
    """User profiles keyed by the identity provider uid."""

    collection_name = COLLECTION_USERS
    resource = "user"
    field_map = USER_FIELDS

    def _to_doc(self, entity: UserEntity) -> dict[str, Any]:
        return user_to_doc(entity)

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> UserEntity:
        return user_from_doc(doc_id, data)

    async def get_by_email(self, email: str) -> UserEntity | None:
        users = await self._collect(self._coll.where("email", "==", email).limit(1))
        return users[0] if users else None

    async def list_users(self, *, dept: str | None = None) -> list[UserEntity]:
        source = self._coll if dept is None else self._coll.where("dept", "==", dept)
        return sorted(await self._collect(source), key=lambda u: u.name)

    def subscribe(self, callback: SnapshotCallback) -> PollingSubscription:
        return PollingSubscription(
            self.list_users, callback, self._poll_interval, name=COLLECTION_USERS
        )


class FirestoreDepartmentRepository(FirestoreRepository[DepartmentEntity]):
    collection_name = COLLECTION_DEPARTMENTS
    resource = "department"
    field_map = DEPARTMENT_FIELDS

    def _to_doc(self, entity: DepartmentEntity) -> dict[str, Any]:
        return department_to_doc(entity)

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> DepartmentEntity:
        return department_from_doc(doc_id, data)

    async def list_departments(self) -> list[DepartmentEntity]:
        return sorted(await self._collect(self._coll), key=lambda d: d.name)

    def subscribe(self, callback: SnapshotCallback) -> PollingSubscription:
        return PollingSubscription(
            self.list_departments, callback, self._poll_interval, name=COLLECTION_DEPARTMENTS
        )
