"""Shared create/get/update/delete for Firestore-backed repositories."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any, Generic, TypeVar

from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.firebase._rest_client import (
    CollectionReference,
    DocumentExistsError,
    DocumentSnapshot,
    FirestoreRESTClient,
    _Query,
)
from app.infrastructure.firebase.mappers import select_fields

T = TypeVar("T")


class FirestoreRepository(Generic[T]):
    """One collection, one entity type, one mapper pair."""

    collection_name: str = ""
    resource: str = ""
    field_map: dict[str, str] = {}

    def __init__(self, client: FirestoreRESTClient, poll_interval_seconds: float = 5.0) -> None:
        self._client = client
        self._coll: CollectionReference = client.collection(self.collection_name)
        self._poll_interval = poll_interval_seconds

    def _to_doc(self, entity: T) -> dict[str, Any]:
        raise NotImplementedError

    def _from_doc(self, doc_id: str, data: dict[str, Any]) -> T:
        raise NotImplementedError

    def _from_snapshot(self, snapshot: DocumentSnapshot) -> T:
        return self._from_doc(snapshot.id, snapshot.to_dict())

    async def _collect(self, query: _Query | CollectionReference) -> list[T]:
        return [self._from_snapshot(s) async for s in query.stream()]

    async def create(self, entity: T) -> T:
        try:
            await self._coll.create(entity.id, self._to_doc(entity))
        except DocumentExistsError as exc:
            raise ValidationException(
                f"{self.resource} already exists: {entity.id}", field="id"
            ) from exc
        return entity

    async def get_by_id(self, entity_id: str) -> T | None:
        snapshot = await self._coll.document(entity_id).get()
        if snapshot is None:
            return None
        return self._from_snapshot(snapshot)

    async def update(self, entity: T, fields: Collection[str]) -> None:
        """Write only the named attributes (translated to document field names)."""
        data = select_fields(self._to_doc(entity), self.field_map, fields)
        if not data:
            return
        if not await self._coll.document(entity.id).update(data):
            raise ResourceNotFoundException(self.resource, entity.id)

    async def delete(self, entity_id: str) -> bool:
        ref = self._coll.document(entity_id)
        if await ref.get() is None:
            return False
        await ref.delete()
        return True


