"""WebSocket connection manager used by the live dashboard endpoint."""

from app.api.websocket.manager import ConnectionManager

__all__ = ["ConnectionManager"]
