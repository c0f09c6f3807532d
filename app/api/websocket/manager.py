"""WebSocket connection manager.

Tracks live dashboard connections per user. Use via app.state.ws_manager
(set in lifespan). Each connection runs its own snapshot subscriptions; the
manager only records who is connected.
"""

from __future__ import annotations

import asyncio

from fastapi import WebSocket


class ConnectionManager:
    """Registry of accepted WebSockets keyed by user id (lock-protected)."""

    def __init__(self) -> None:
        self._connections_by_user: dict[str, set[WebSocket]] = {}
        self._websocket_to_user: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept and register a new connection for user_id."""
        await websocket.accept()
        async with self._lock:
            self._connections_by_user.setdefault(user_id, set()).add(websocket)
            self._websocket_to_user[websocket] = user_id

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection (call on disconnect). Unknown sockets are ignored."""
        async with self._lock:
            user_id = self._websocket_to_user.pop(websocket, None)
            if user_id is None:
                return
            conns = self._connections_by_user.get(user_id, set())
            conns.discard(websocket)
            if not conns:
                self._connections_by_user.pop(user_id, None)

    async def connected_users(self) -> set[str]:
        async with self._lock:
            return set(self._connections_by_user)

    async def get_connection_count(self) -> int:
        """Return the total number of active connections (lock-safe)."""
        async with self._lock:
            return sum(len(c) for c in self._connections_by_user.values())
