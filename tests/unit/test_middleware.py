"""Raw-ASGI middleware tests (request id and upload size limit)."""

import logging

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from app.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware
from app.middleware.request_id import sanitize_request_id
from app.shared.telemetry.logging import RequestIdFilter, request_id_var


def _app() -> FastAPI:
    app = FastAPI()

    @app.post("/tasks/{task_id}/attachments")
    async def upload(task_id: str, request: Request):
        body = await request.body()
        return {"size": len(body), "request_id": request_id_var.get()}

    @app.post("/tasks")
    async def create(request: Request):
        return {"size": len(await request.body())}

    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=10)
    app.add_middleware(RequestIDMiddleware, header_name="X-Request-ID")
    return app


@pytest.fixture
async def client() -> AsyncClient:
    async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://test") as ac:
        yield ac


async def test_request_id_is_echoed_and_bound_to_logs(client: AsyncClient) -> None:
    response = await client.post(
        "/tasks/t1/attachments", content=b"abc", headers={"X-Request-ID": "req-123"}
    )
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"
    assert request_id_var.get() == "-"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.post(
        "/tasks", content=b"x", headers={"X-Request-ID": "bad id\nforged"}
    )
    assert response.headers["X-Request-ID"] != "bad id\nforged"
    assert len(response.headers["X-Request-ID"]) == 36


async def test_upload_over_limit_is_rejected(client: AsyncClient) -> None:
    response = await client.post("/tasks/t1/attachments", content=b"x" * 11)
    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"
    assert response.json()["details"]["max_bytes"] == 10


async def test_chunked_upload_is_counted(client: AsyncClient) -> None:
    async def chunks():
        yield b"12345"
        yield b"678"

    response = await client.post("/tasks/t1/attachments", content=chunks())
    assert response.status_code == 200
    assert response.json()["size"] == 8

    async def too_many():
        for _ in range(3):
            yield b"12345"

    response = await client.post("/tasks/t1/attachments", content=too_many())
    assert response.status_code == 413


async def test_other_paths_are_not_limited(client: AsyncClient) -> None:
    response = await client.post("/tasks", content=b"x" * 50)
    assert response.status_code == 200


def test_sanitize_request_id() -> None:
    assert sanitize_request_id("abc_DEF-1") == "abc_DEF-1"
    assert sanitize_request_id("x" * 65) != "x" * 65
    assert sanitize_request_id(None)


def test_log_filter_adds_request_id() -> None:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    token = request_id_var.set("abc")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "abc"
