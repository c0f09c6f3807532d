"""In-process document store used when database_backend is 'memory'.

Holds one dict per collection and pushes a fresh snapshot to subscribers after
every write. Values are deep-copied on the way in and out so callers never
share mutable state with the store.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class MemorySubscription:
    """Subscription handle; cancel() detaches the listener."""

    def __init__(self, store: "InMemoryStore", collection: str, listener: Callable[[], None]):
        self._store = store
        self._collection = collection
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._detach(self._collection, self._listener)


class InMemoryStore:
    """Collections of id -> entity with change listeners."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Any]] = {}
        self._listeners: dict[str, list[Callable[[], None]]] = {}
        self.batch_commits = 0

    def _coll(self, name: str) -> dict[str, Any]:
        return self._collections.setdefault(name, {})

    def get(self, collection: str, doc_id: str) -> Any | None:
        value = self._coll(collection).get(doc_id)
        return copy.deepcopy(value) if value is not None else None

    def all(self, collection: str) -> list[Any]:
        return [copy.deepcopy(v) for v in self._coll(collection).values()]

    def put(self, collection: str, doc_id: str, value: Any) -> None:
        self._coll(collection)[doc_id] = copy.deepcopy(value)
        self._emit(collection)

    def patch(self, collection: str, doc_id: str, source: Any, fields: set[str]) -> bool:
        """Copy the named attributes from source onto the stored value."""
        current = self._coll(collection).get(doc_id)
        if current is None:
            return False
        for name in fields:
            setattr(current, name, copy.deepcopy(getattr(source, name)))
        self._emit(collection)
        return True

    def patch_many(self, collection: str, updates: dict[str, dict[str, Any]]) -> int:
        """Apply attribute updates to several documents as one commit."""
        coll = self._coll(collection)
        for doc_id, values in updates.items():
            current = coll.get(doc_id)
            if current is None:
                continue
            for name, value in values.items():
                setattr(current, name, value)
        self.batch_commits += 1
        if updates:
            self._emit(collection)
        return len(updates)

    def delete(self, collection: str, doc_id: str) -> bool:
        existed = self._coll(collection).pop(doc_id, None) is not None
        if existed:
            self._emit(collection)
        return existed

    def listen(self, collection: str, listener: Callable[[], None]) -> MemorySubscription:
        """Register listener, call it once immediately, and return its handle."""
        self._listeners.setdefault(collection, []).append(listener)
        listener()
        return MemorySubscription(self, collection, listener)

    def _detach(self, collection: str, listener: Callable[[], None]) -> None:
        listeners = self._listeners.get(collection, [])
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, collection: str) -> None:
        for listener in list(self._listeners.get(collection, [])):
            try:
                listener()
            except Exception:
                logger.exception("Snapshot listener failed for %s", collection)

    def clear(self) -> None:
        self._collections.clear()
        self.batch_commits = 0
