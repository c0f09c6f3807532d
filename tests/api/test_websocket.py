"""WebSocket snapshot stream tests (TestClient runs the app lifespan)."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from app.domain.entities.user import UserEntity
from app.domain.enums import Permission
from app.infrastructure.backend import Backend
from app.infrastructure.security import create_access_token
from app.main import app
from tests.factories import headers_for, make_user


@pytest.fixture
def live_client(backend: Backend):
    app.state.backend = backend
    with TestClient(app) as tc:
        yield tc
    app.state.backend = None


@pytest.fixture
def live_admin(live_client: TestClient, backend: Backend) -> UserEntity:
    """Admin profile created on the client's event loop."""
    user = make_user("admin", name="Admin", permissions={Permission.ADMIN.value}, dept="FOH")
    return live_client.portal.call(backend.users.create, user)


def test_rejects_missing_and_invalid_tokens(live_client: TestClient) -> None:
    for url in ("/api/v1/ws", "/api/v1/ws?token=bogus"):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with live_client.websocket_connect(url) as ws:
                ws.receive_json()
        assert exc_info.value.code == 1008


def test_streams_snapshots(live_client: TestClient, live_admin: UserEntity) -> None:
    token = create_access_token({"sub": live_admin.id, "email": live_admin.email})
    with live_client.websocket_connect(f"/api/v1/ws?token={token}") as ws:
        initial = ws.receive_json()
        assert initial == {"type": "notifications", "items": [], "unread": 0}
        assert ws.receive_json() == {"type": "tasks", "items": []}

        ws.send_text("ping")
        assert ws.receive_text() == "pong"

        ready = live_client.get("/api/v1/health/ready").json()
        assert ready["websocket_connections"] == 1

        response = live_client.post(
            "/api/v1/tasks",
            json={
                "title": "Count the till",
                "description": "Before closing",
                "responsible": live_admin.id,
                "accountable": live_admin.id,
                "dept": "FOH",
            },
            headers=headers_for(live_admin),
        )
        assert response.status_code == 201

        tasks = ws.receive_json()
        assert tasks["type"] == "tasks"
        assert [t["title"] for t in tasks["items"]] == ["Count the till"]
        notifications = ws.receive_json()
        assert notifications["type"] == "notifications"
        assert notifications["unread"] == 1
        assert notifications["items"][0]["type"] == "assignment"

