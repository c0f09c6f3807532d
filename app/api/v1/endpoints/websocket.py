"""WebSocket endpoint: live notification and task-board snapshots.

The client connects with ?token=<session token>. Each repository snapshot
(the user's notifications, and the task list for users who may view tasks)
is pushed as JSON: {"type": "notifications", "items": [...], "unread": n}
or {"type": "tasks", "items": [...]}. Sending "ping" returns "pong".
"""

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.api.v1.dependencies import resolve_user_from_token
from app.domain.enums import Permission
from app.schemas.notification import NotificationResponse
from app.schemas.task import TaskResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


def _notifications_message(items: list) -> dict:
    return {
        "type": "notifications",
        "items": [NotificationResponse.model_validate(n).model_dump(mode="json") for n in items],
        "unread": sum(1 for n in items if not n.is_read),
    }


def _tasks_message(items: list) -> dict:
    return {
        "type": "tasks",
        "items": [TaskResponse.model_validate(t).model_dump(mode="json") for t in items],
    }


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Stream snapshots until the client disconnects; subscriptions are cancelled on exit."""
    backend = getattr(websocket.app.state, "backend", None)
    manager = websocket.app.state.ws_manager
    token = websocket.query_params.get("token")
    if not token:
        await _reject_websocket(websocket, "Missing token")
        return
    user = await resolve_user_from_token(backend, token) if backend else None
    if user is None:
        await _reject_websocket(websocket, "Invalid token")
        return

    await manager.connect(websocket, user.id)
    outbox: asyncio.Queue[dict] = asyncio.Queue()
    subscriptions = [
        backend.notifications.subscribe(
            user.id, lambda items: outbox.put_nowait(_notifications_message(items))
        )
    ]
    if user.has_any_permission(Permission.VIEW_TASKS, Permission.MANAGE_TASKS):
        subscriptions.append(
            backend.tasks.subscribe(lambda items: outbox.put_nowait(_tasks_message(items)))
        )

    async def pump() -> None:
        while True:
            await websocket.send_json(await outbox.get())

    async def listen() -> None:
        while True:
            if await websocket.receive_text() == "ping":
                await websocket.send_text("pong")

    tasks = [asyncio.create_task(pump()), asyncio.create_task(listen())]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for finished in done:
            exc = finished.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("WebSocket for %s closed with error: %s", user.id, exc)
    finally:
        for task in tasks:
            task.cancel()
        for subscription in subscriptions:
            subscription.cancel()
        await manager.disconnect(websocket)
