"""Cloud Storage for Firebase over the JSON REST API (implements IBlobStore)."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from app.domain.exceptions import BackingStoreException
from app.infrastructure.firebase._rest_client import FirestoreRESTClient

logger = logging.getLogger(__name__)

_UPLOAD_BASE = "https://storage.googleapis.com/upload/storage/v1"
_API_BASE = "https://storage.googleapis.com/storage/v1"
_DOWNLOAD_BASE = "https://firebasestorage.googleapis.com/v0"


class FirebaseBlobStore:
    """Uploads attachments to a bucket using the service account of the Firestore client."""

    def __init__(self, client: FirestoreRESTClient, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    def download_url(self, path: str) -> str:
        return f"{_DOWNLOAD_BASE}/b/{self._bucket}/o/{quote(path, safe='')}?alt=media"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        headers = {
            "Authorization": f"Bearer {await self._client.get_token()}",
            "Content-Type": content_type or "application/octet-stream",
        }
        try:
            resp = await self._client.http.post(
                f"{_UPLOAD_BASE}/b/{self._bucket}/o",
                params={"uploadType": "media", "name": path},
                headers=headers,
                content=content,
            )
        except httpx.HTTPError as exc:
            raise BackingStoreException("storage upload", str(exc)) from exc
        if resp.status_code != 200:
            logger.warning("Upload of %s returned %s: %s", path, resp.status_code, resp.text)
            raise BackingStoreException("storage upload", f"HTTP {resp.status_code}")
        logger.info("Uploaded %d bytes to gs://%s/%s", len(content), self._bucket, path)
        return self.download_url(path)

    async def delete(self, path: str) -> None:
        headers = {"Authorization": f"Bearer {await self._client.get_token()}"}
        try:
            resp = await self._client.http.delete(
                f"{_API_BASE}/b/{self._bucket}/o/{quote(path, safe='')}", headers=headers
            )
        except httpx.HTTPError as exc:
            raise BackingStoreException("storage delete", str(exc)) from exc
        if resp.status_code not in (200, 204, 404):
            raise BackingStoreException("storage delete", f"HTTP {resp.status_code}")
