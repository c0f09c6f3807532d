"""Upload size limit middleware.

Rejects request bodies larger than max_bytes on the configured path
suffixes (attachment uploads). Declared Content-Length is checked up front;
bodies without one (chunked) are buffered and counted before the app sees
them. Raw ASGI.
"""

import json
from typing import Any, Callable

from app.middleware.request_id import get_header


async def _send_413(send: Callable, max_bytes: int, actual: int | None = None) -> None:
    details: dict[str, Any] = {"max_bytes": max_bytes}
    if actual is not None:
        details["content_length"] = actual
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Upload must be at most {max_bytes} bytes",
            "details": details,
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(
    app: Callable,
    max_bytes: int,
    path_suffixes: tuple[str, ...] = ("/attachments",),
) -> Callable:
    """Enforce max_bytes on POST/PUT bodies whose path ends with one of path_suffixes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if (
            scope["type"] != "http"
            or scope.get("method") not in ("POST", "PUT")
            or not scope.get("path", "").rstrip("/").endswith(path_suffixes)
        ):
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared and declared.isdigit():
            if int(declared) > max_bytes:
                await _send_413(send, max_bytes, int(declared))
                return
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                continue
            chunk = message.get("body", b"")
            total += len(chunk)
            if total > max_bytes:
                await _send_413(send, max_bytes, total)
                return
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        body = b"".join(chunks)
        replayed = False

        async def replay_receive() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await app(scope, replay_receive, send)

    return asgi_app
