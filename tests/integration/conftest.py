"""Fixtures for the Firebase REST adapters (no network; httpx.MockTransport)."""

import httpx
import pytest

from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from tests.firebase_fakes import PROJECT, FakeCredentials, FakeServer


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def http(server: FakeServer) -> httpx.AsyncClient:
    async with httpx.AsyncClient(transport=httpx.MockTransport(server)) as client:
        yield client


@pytest.fixture
def firestore(http: httpx.AsyncClient) -> FirestoreRESTClient:
    return FirestoreRESTClient(PROJECT, FakeCredentials(), http_client=http)
