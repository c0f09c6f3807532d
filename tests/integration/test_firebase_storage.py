"""Cloud Storage adapter for task attachments."""

import httpx
import pytest

from app.domain.exceptions import BackingStoreException
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.services.storage import FirebaseBlobStore
from tests.firebase_fakes import FakeServer

BUCKET = "demo-project.appspot.com"


@pytest.fixture
def blobs(firestore: FirestoreRESTClient) -> FirebaseBlobStore:
    return FirebaseBlobStore(firestore, BUCKET)


async def test_upload_sends_media_and_returns_download_url(
    blobs: FirebaseBlobStore, server: FakeServer
) -> None:
    url = await blobs.upload("tasks/t1/a1-menu.pdf", b"%PDF-1.4", "application/pdf")

    assert url == (
        "https://firebasestorage.googleapis.com/v0/b/demo-project.appspot.com"
        "/o/tasks%2Ft1%2Fa1-menu.pdf?alt=media"
    )
    request = server.last
    assert request.method == "POST"
    assert request.url.host == "storage.googleapis.com"
    assert request.url.path == f"/upload/storage/v1/b/{BUCKET}/o"
    assert request.url.params["uploadType"] == "media"
    assert request.url.params["name"] == "tasks/t1/a1-menu.pdf"
    assert request.headers["Content-Type"] == "application/pdf"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.content == b"%PDF-1.4"


async def test_upload_failure_raises(blobs: FirebaseBlobStore, server: FakeServer) -> None:
    server.handler = lambda request: httpx.Response(403, text="forbidden")
    with pytest.raises(BackingStoreException) as exc_info:
        await blobs.upload("tasks/t1/a1-menu.pdf", b"data", "application/pdf")
    assert exc_info.value.details["operation"] == "storage upload"


async def test_delete_tolerates_missing_object(blobs: FirebaseBlobStore, server: FakeServer) -> None:
    server.handler = lambda request: httpx.Response(404, json={})
    await blobs.delete("tasks/t1/a1-menu.pdf")
    assert server.last.method == "DELETE"
    assert server.last.url.raw_path.endswith(b"/o/tasks%2Ft1%2Fa1-menu.pdf")


async def test_delete_server_error_raises(blobs: FirebaseBlobStore, server: FakeServer) -> None:
    server.handler = lambda request: httpx.Response(500, text="boom")
    with pytest.raises(BackingStoreException):
        await blobs.delete("tasks/t1/a1-menu.pdf")
