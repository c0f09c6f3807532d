"""Pytest configuration and fixtures for the task dashboard.

Tests run against the in-memory backend: DATABASE_BACKEND=memory is set
before app.main is imported, and each API test installs a fresh backend on
app.state (ASGITransport does not run the lifespan).
"""

import os

os.environ.setdefault("DATABASE_BACKEND", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("REMINDER_ENABLED", "false")
os.environ.setdefault("LOCALE", "en")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.api.websocket import ConnectionManager  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.core.limiter import limiter  # noqa: E402
from app.domain.entities.user import UserEntity  # noqa: E402
from app.domain.enums import Permission  # noqa: E402
from app.infrastructure.backend import Backend, build_memory_backend  # noqa: E402
from app.main import app  # noqa: E402
from tests.factories import headers_for, make_user  # noqa: E402

get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Rate-limit counters are process-wide; start every test from zero."""
    limiter.reset()
    yield


@pytest.fixture
def backend() -> Backend:
    return build_memory_backend()


@pytest.fixture
async def client(backend: Backend) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with a fresh memory backend."""
    app.state.backend = backend
    app.state.ws_manager = ConnectionManager()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.backend = None


@pytest.fixture
async def admin(backend: Backend) -> UserEntity:
    """Admin profile stored in the backend."""
    return await backend.users.create(
        make_user("admin", name="Admin", permissions={Permission.ADMIN.value}, dept="Quản lý")
    )


@pytest.fixture
def auth_headers(admin: UserEntity) -> dict[str, str]:
    """Bearer headers for the admin profile."""
    return headers_for(admin)
