"""Tests for AuthService."""

import os
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import bcrypt
import pytest
from jose import jwt

from agentgate.dao.user_dao import UserDAO
from agentgate.models.user import User
from agentgate.services import AuthenticationError
from agentgate.services.auth_service import (
    _ACCESS_TOKEN_EXPIRE,
    _ALGORITHM,
    _REFRESH_TOKEN_EXPIRE,
    AccessToken,
    AuthService,
    TokenPair,
    hash_password,
)

TEST_SECRET = "agentgate-unit-test-secret"
SECRET_ENV = {"AGENTGATE_JWT_SECRET": TEST_SECRET}

ADMIN_ENV = {
    "AGENTGATE_ADMIN_USERNAME": "admin",
    "AGENTGATE_ADMIN_EMAIL": "admin@example.com",
    "AGENTGATE_ADMIN_PASSWORD": "password123",
}


def _make_user(
    *,
    password: str = "s3cret!",
    role: str = "member",
    onboarding_complete: bool = False,
) -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=uuid.uuid4(),
        username="bob",
        email="bob@example.com",
        password_hash=hash_password(password),
        role=role,
        onboarding_complete=onboarding_complete,
        created_at=now,
        updated_at=now,
    )


def _make_service() -> tuple[AuthService, UserDAO]:
    dao = UserDAO()
    return AuthService(dao), dao


def _token(sub: str | None, token_type: str, lifetime: timedelta, secret: str = TEST_SECRET) -> str:
    payload: dict = {"type": token_type, "exp": datetime.now(timezone.utc) + lifetime}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


# ---------------------------------------------------------------------------
# ensure_admin_exists
# ---------------------------------------------------------------------------


class TestEnsureAdminExists:
    async def test_upserts_admin_from_env(self):
        service, dao = _make_service()
        dao.upsert = AsyncMock()

        with patch.dict(os.environ, ADMIN_ENV):
            await service.ensure_admin_exists(AsyncMock())

        kwargs = dao.upsert.await_args.kwargs
        assert kwargs["username"] == "admin"
        assert kwargs["email"] == "admin@example.com"
        assert kwargs["role"] == "admin"
        assert bcrypt.checkpw(b"password123", kwargs["password_hash"].encode())

    @pytest.mark.parametrize("missing", sorted(ADMIN_ENV))
    async def test_skips_when_any_var_missing(self, missing):
        service, dao = _make_service()
        dao.upsert = AsyncMock()

        with patch.dict(os.environ, ADMIN_ENV):
            os.environ.pop(missing)
            await service.ensure_admin_exists(AsyncMock())

        dao.upsert.assert_not_awaited()


# ---------------------------------------------------------------------------
# sign_in
# ---------------------------------------------------------------------------


class TestSignIn:
    async def test_success_issues_access_and_refresh(self):
        user = _make_user()
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with patch.dict(os.environ, SECRET_ENV):
            pair = await service.sign_in(AsyncMock(), user.email, "s3cret!")

        assert isinstance(pair, TokenPair)
        assert pair.token_type == "bearer"
        access = jwt.decode(pair.access_token, TEST_SECRET, algorithms=[_ALGORITHM])
        refresh = jwt.decode(pair.refresh_token, TEST_SECRET, algorithms=[_ALGORITHM])
        assert access["sub"] == refresh["sub"] == str(user.id)
        assert access["type"] == "access"
        assert refresh["type"] == "refresh"

        now = datetime.now(timezone.utc)
        access_exp = datetime.fromtimestamp(access["exp"], tz=timezone.utc)
        refresh_exp = datetime.fromtimestamp(refresh["exp"], tz=timezone.utc)
        assert abs((access_exp - now) - _ACCESS_TOKEN_EXPIRE) < timedelta(seconds=10)
        assert abs((refresh_exp - now) - _REFRESH_TOKEN_EXPIRE) < timedelta(seconds=10)

    async def test_unknown_email(self):
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=None)

        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="invalid credentials"),
        ):
            await service.sign_in(AsyncMock(), "nobody@example.com", "whatever")

    async def test_wrong_password(self):
        user = _make_user(password="right")
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="invalid credentials"),
        ):
            await service.sign_in(AsyncMock(), user.email, "wrong")

    async def test_missing_secret_raises(self):
        user = _make_user()
        service, dao = _make_service()
        dao.get_by_email = AsyncMock(return_value=user)

        with patch.dict(os.environ, {}), pytest.raises(RuntimeError, match="AGENTGATE_JWT_SECRET"):
            os.environ.pop("AGENTGATE_JWT_SECRET", None)
            await service.sign_in(AsyncMock(), user.email, "s3cret!")


# ---------------------------------------------------------------------------
# refresh
# ---------------------------------------------------------------------------


class TestRefresh:
    async def test_issues_new_access_token(self):
        sub = str(uuid.uuid4())
        service, dao = _make_service()
        dao.get_by_id = AsyncMock()

        with patch.dict(os.environ, SECRET_ENV):
            result = service.refresh(_token(sub, "refresh", timedelta(days=1)))

        assert isinstance(result, AccessToken)
        payload = jwt.decode(result.access_token, TEST_SECRET, algorithms=[_ALGORITHM])
        assert payload["sub"] == sub
        assert payload["type"] == "access"
        dao.get_by_id.assert_not_awaited()

    @pytest.mark.parametrize(
        ("token_args", "message"),
        [
            ((None, "refresh", timedelta(days=1)), "invalid token payload"),
            (("x", "access", timedelta(days=1)), "invalid token type"),
            (("x", "refresh", -timedelta(hours=1)), "invalid refresh token"),
            (("x", "refresh", timedelta(days=1), "other-secret"), "invalid refresh token"),
        ],
    )
    async def test_rejects_bad_tokens(self, token_args, message):
        service, _ = _make_service()
        token = _token(*token_args)

        with patch.dict(os.environ, SECRET_ENV), pytest.raises(AuthenticationError, match=message):
            service.refresh(token)

    async def test_rejects_garbage(self):
        service, _ = _make_service()
        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="invalid refresh token"),
        ):
            service.refresh("not-a-jwt")


# ---------------------------------------------------------------------------
# get_current_user
# ---------------------------------------------------------------------------


class TestGetCurrentUser:
    async def test_returns_user(self):
        user = _make_user()
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=user)
        session = AsyncMock()

        with patch.dict(os.environ, SECRET_ENV):
            result = await service.get_current_user(
                session, _token(str(user.id), "access", timedelta(minutes=5))
            )

        assert result is user
        dao.get_by_id.assert_awaited_once_with(session, user.id)

    async def test_refresh_token_not_accepted(self):
        service, _ = _make_service()
        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="invalid token type"),
        ):
            await service.get_current_user(
                AsyncMock(), _token(str(uuid.uuid4()), "refresh", timedelta(days=1))
            )

    async def test_non_uuid_sub(self):
        service, _ = _make_service()
        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="invalid token payload"),
        ):
            await service.get_current_user(
                AsyncMock(), _token("not-a-uuid", "access", timedelta(minutes=5))
            )

    async def test_deleted_user(self):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=None)
        with (
            patch.dict(os.environ, SECRET_ENV),
            pytest.raises(AuthenticationError, match="user not found"),
        ):
            await service.get_current_user(
                AsyncMock(), _token(str(uuid.uuid4()), "access", timedelta(minutes=5))
            )


# ---------------------------------------------------------------------------
# complete_onboarding
# ---------------------------------------------------------------------------


class TestCompleteOnboarding:
    async def test_marks_user(self):
        user = _make_user()
        done = _make_user(onboarding_complete=True)
        service, dao = _make_service()
        dao.mark_onboarding_complete = AsyncMock(return_value=done)
        session = AsyncMock()

        result = await service.complete_onboarding(session, user)

        assert result.onboarding_complete is True
        dao.mark_onboarding_complete.assert_awaited_once_with(session, user.id)

    async def test_idempotent(self):
        user = _make_user(onboarding_complete=True)
        service, dao = _make_service()
        dao.mark_onboarding_complete = AsyncMock()

        result = await service.complete_onboarding(AsyncMock(), user)

        assert result is user
        dao.mark_onboarding_complete.assert_not_awaited()
