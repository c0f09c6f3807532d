"""Firebase Authentication adapter: request shape and error mapping."""

import json

import httpx
import pytest

from app.application.dtos.session import Identity
from app.domain.exceptions import AuthenticationException, BackingStoreException
from app.infrastructure.firebase.services.identity import FirebaseIdentityProvider
from tests.firebase_fakes import FakeServer


@pytest.fixture
def identity(http: httpx.AsyncClient) -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider("web-api-key", http_client=http)


def rejected(message: str) -> httpx.Response:
    return httpx.Response(400, json={"error": {"code": 400, "message": message}})


async def test_sign_in_returns_identity(
    identity: FirebaseIdentityProvider, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(
        200,
        json={
            "localId": "uid-1",
            "email": "chef@example.com",
            "displayName": "Chef",
            "idToken": "id-token",
            "refreshToken": "refresh-token",
        },
    )

    result = await identity.sign_in("chef@example.com", "secret")

    assert result == Identity(
        uid="uid-1",
        email="chef@example.com",
        display_name="Chef",
        id_token="id-token",
        refresh_token="refresh-token",
    )
    request = server.last
    assert request.url.path == "/v1/accounts:signInWithPassword"
    assert request.url.params["key"] == "web-api-key"
    assert json.loads(request.content) == {
        "email": "chef@example.com",
        "password": "secret",
        "returnSecureToken": True,
    }


@pytest.mark.parametrize(
    ("provider_message", "expected"),
    [
        ("INVALID_PASSWORD", "Incorrect password."),
        ("EMAIL_NOT_FOUND", "No account found with this email."),
        ("INVALID_LOGIN_CREDENTIALS", "Incorrect email or password."),
        (
            "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been temporarily disabled",
            "Too many failed sign-in attempts. Please try again later.",
        ),
        ("USER_DISABLED", "This account has been disabled."),
    ],
)
async def test_provider_errors_map_to_localized_messages(
    identity: FirebaseIdentityProvider,
    server: FakeServer,
    provider_message: str,
    expected: str,
) -> None:
    server.handler = lambda request: rejected(provider_message)

    with pytest.raises(AuthenticationException) as exc_info:
        await identity.sign_in("chef@example.com", "wrong")

    assert exc_info.value.message == expected
    assert exc_info.value.details["provider_code"] == provider_message.split(":")[0].strip()


async def test_unknown_error_uses_generic_message(
    identity: FirebaseIdentityProvider, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(500, text="not json")

    with pytest.raises(AuthenticationException) as exc_info:
        await identity.sign_in("chef@example.com", "secret")

    assert exc_info.value.message == "An error occurred while signing in. Please try again."
    assert exc_info.value.details == {}


async def test_network_failure_is_a_backing_store_error(
    identity: FirebaseIdentityProvider, server: FakeServer
) -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    server.handler = fail
    with pytest.raises(BackingStoreException):
        await identity.sign_in("chef@example.com", "secret")


async def test_create_account_sends_display_name(
    identity: FirebaseIdentityProvider, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(
        200, json={"localId": "uid-2", "email": "new@example.com", "idToken": "t"}
    )

    result = await identity.create_account("new@example.com", "secret1", display_name="New Hire")

    assert result.uid == "uid-2"
    assert result.display_name == "New Hire"
    assert server.last.url.path == "/v1/accounts:signUp"
    assert json.loads(server.last.content)["displayName"] == "New Hire"


async def test_sign_out_makes_no_request(
    identity: FirebaseIdentityProvider, server: FakeServer
) -> None:
    await identity.sign_out(Identity(uid="uid-1", email="chef@example.com"))
    assert server.requests == []
