"""Polling snapshot subscriptions for the Firestore REST backend.

The REST API has no listen stream we can use from httpx, so a subscription
re-runs its query every interval and calls back when the result changed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from app.application.interfaces.repositories import SnapshotCallback

logger = logging.getLogger(__name__)


class PollingSubscription:
    """Runs fetch() on a timer and delivers changed snapshots to callback.

    The first snapshot is always delivered. Must be created inside a running
    event loop; cancel() stops the background task.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list]],
        callback: SnapshotCallback,
        interval_seconds: float = 5.0,
        name: str = "snapshot",
    ) -> None:
        self._fetch = fetch
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._last: list | None = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        self._task.cancel()

    async def poll_once(self) -> bool:
        """Fetch once; return True if the callback was invoked."""
        snapshot = await self._fetch()
        if self._last is not None and snapshot == self._last:
            return False
        self._last = snapshot
        self._callback(snapshot)
        return True

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Polling %s subscription failed; retrying", self._name)
            await asyncio.sleep(self._interval)
