"""SessionService tests: sign-in, profile provisioning and sign-out."""

from dataclasses import replace

import pytest

from app.application.dtos.session import Identity
from app.application.use_cases.session import SessionService
from app.domain.entities.user import DEFAULT_PERMISSIONS
from app.domain.enums import UserStatus
from app.domain.exceptions import AuthenticationException, ValidationException
from app.infrastructure.backend import build_memory_backend
from app.infrastructure.security import verify_token
from tests.factories import make_user


class _Tokens:
    def create_access_token(self, data: dict) -> str:
        from app.infrastructure.security import create_access_token

        return create_access_token(data)


@pytest.fixture
async def env():
    backend = build_memory_backend()
    await backend.identity.create_account("cook@example.com", "secret-pass", uid="cook")
    return backend, SessionService(backend.identity, backend.users, _Tokens(), token_ttl_minutes=60)


async def test_first_sign_in_provisions_view_only_profile(env) -> None:
    backend, sessions = env
    result = await sessions.sign_in("cook@example.com", "secret-pass")
    assert result.user.id == "cook"
    assert result.user.name == "cook"
    assert result.user.permissions == set(DEFAULT_PERMISSIONS)
    assert result.user.role == "Staff"
    assert result.user.last_login is not None
    assert verify_token(result.access_token)["sub"] == "cook"
    stored = await backend.users.get_by_id("cook")
    assert stored.last_login == result.user.last_login


async def test_existing_profile_is_kept(env) -> None:
    backend, sessions = env
    await backend.users.create(make_user("cook", name="Head Cook", permissions={"admin"}))
    result = await sessions.sign_in("cook@example.com", "secret-pass")
    assert result.user.name == "Head Cook"
    assert result.user.permissions == {"admin"}


@pytest.mark.parametrize(
    ("email", "password", "code", "message"),
    [
        ("nobody@example.com", "x", "EMAIL_NOT_FOUND", "No account found with this email."),
        ("cook@example.com", "wrong", "INVALID_PASSWORD", "Incorrect password."),
    ],
)
async def test_provider_errors_are_localized(env, email, password, code, message) -> None:
    _, sessions = env
    with pytest.raises(AuthenticationException) as exc_info:
        await sessions.sign_in(email, password)
    assert exc_info.value.details["provider_code"] == code
    assert exc_info.value.message == message


async def test_disabled_account(env) -> None:
    backend, sessions = env
    backend.identity.disable("cook@example.com")
    with pytest.raises(AuthenticationException) as exc_info:
        await sessions.sign_in("cook@example.com", "secret-pass")
    assert exc_info.value.details["provider_code"] == "USER_DISABLED"


async def test_inactive_profile_cannot_sign_in(env) -> None:
    backend, sessions = env
    await backend.users.create(replace(make_user("cook"), status=UserStatus.INACTIVE))
    with pytest.raises(AuthenticationException):
        await sessions.sign_in("cook@example.com", "secret-pass")


async def test_empty_credentials_rejected(env) -> None:
    _, sessions = env
    with pytest.raises(ValidationException):
        await sessions.sign_in(" ", "x")
    with pytest.raises(ValidationException):
        await sessions.sign_in("cook@example.com", "")


async def test_sign_out_reaches_provider(env) -> None:
    backend, sessions = env
    await sessions.sign_out(Identity(uid="cook", email="cook@example.com"))
    assert backend.identity.signed_out == ["cook"]
