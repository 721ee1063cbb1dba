"""AuthService — JWT sign-in, onboarding and admin bootstrap."""

import os
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import structlog
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.dao.user_dao import UserDAO
from agentgate.models.user import ROLE_ADMIN, User
from agentgate.services import AuthenticationError

log = structlog.get_logger("agentgate.auth")

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


# ---------------------------------------------------------------------------
# JWT configuration
# ---------------------------------------------------------------------------

# Pre-computed bcrypt hash for timing-safe sign-in (unknown email path)
_DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt()).decode()

_ALGORITHM = "HS256"
_ACCESS_TOKEN_EXPIRE = timedelta(minutes=30)
_REFRESH_TOKEN_EXPIRE = timedelta(days=7)

_ENV_JWT_SECRET = "AGENTGATE_JWT_SECRET"
_ENV_ADMIN_USERNAME = "AGENTGATE_ADMIN_USERNAME"
_ENV_ADMIN_EMAIL = "AGENTGATE_ADMIN_EMAIL"
_ENV_ADMIN_PASSWORD = "AGENTGATE_ADMIN_PASSWORD"


def _get_secret() -> str:
    """Read JWT secret from environment. Raises if not set."""
    secret = os.environ.get(_ENV_JWT_SECRET)
    if not secret:
        raise RuntimeError(f"{_ENV_JWT_SECRET} environment variable is required")
    return secret


def _encode(sub: str, token_type: str, lifetime: timedelta) -> str:
    return jwt.encode(
        {
            "sub": sub,
            "type": token_type,
            "exp": datetime.now(timezone.utc) + lifetime,
        },
        _get_secret(),
        algorithm=_ALGORITHM,
    )


def _decode(token: str, expected_type: str) -> str:
    """Return the ``sub`` claim of a valid token of *expected_type*."""
    try:
        payload = jwt.decode(token, _get_secret(), algorithms=[_ALGORITHM])
    except JWTError:
        raise AuthenticationError(f"invalid {expected_type} token")

    if payload.get("type") != expected_type:
        raise AuthenticationError("invalid token type")

    sub = payload.get("sub")
    if not sub:
        raise AuthenticationError("invalid token payload")
    return sub


# ---------------------------------------------------------------------------
# Token data classes
# ---------------------------------------------------------------------------


class TokenPair:
    """Access + refresh token pair returned by sign-in."""

    __slots__ = ("access_token", "refresh_token", "token_type")

    def __init__(self, access_token: str, refresh_token: str) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.token_type = "bearer"


class AccessToken:
    """Single access token returned by refresh."""

    __slots__ = ("access_token", "token_type")

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token
        self.token_type = "bearer"


# ---------------------------------------------------------------------------
# AuthService
# ---------------------------------------------------------------------------


class AuthService:
    """Stateless authentication service."""

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    # -- Bootstrap ---------------------------------------------------------

    async def ensure_admin_exists(self, session: AsyncSession) -> None:
        """Create the initial admin user from environment variables.

        Reads ``AGENTGATE_ADMIN_USERNAME``, ``AGENTGATE_ADMIN_EMAIL``,
        and ``AGENTGATE_ADMIN_PASSWORD``. Skips if any are missing.
        """
        username = os.environ.get(_ENV_ADMIN_USERNAME)
        email = os.environ.get(_ENV_ADMIN_EMAIL)
        password = os.environ.get(_ENV_ADMIN_PASSWORD)

        if not all([username, email, password]):
            log.warning("auth.admin_bootstrap_skipped", reason="admin env vars not set")
            return

        await self._user_dao.upsert(
            session,
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=ROLE_ADMIN,
        )

    # -- Sign-in / Token ---------------------------------------------------

    async def sign_in(self, session: AsyncSession, email: str, password: str) -> TokenPair:
        """Verify credentials and return an access + refresh token pair.

        Raises :class:`AuthenticationError` on invalid credentials without
        revealing whether the email exists.
        """
        user = await self._user_dao.get_by_email(session, email)
        if user is None:
            _verify_password(password, _DUMMY_HASH)
            raise AuthenticationError("invalid credentials")
        if not _verify_password(password, user.password_hash):
            raise AuthenticationError("invalid credentials")

        sub = str(user.id)
        log.info("auth.signed_in", user_id=sub)
        return TokenPair(
            _encode(sub, "access", _ACCESS_TOKEN_EXPIRE),
            _encode(sub, "refresh", _REFRESH_TOKEN_EXPIRE),
        )

    def refresh(self, refresh_token: str) -> AccessToken:
        """Validate a refresh token and issue a new access token.

        Raises :class:`AuthenticationError` on invalid or expired token.
        """
        sub = _decode(refresh_token, "refresh")
        return AccessToken(_encode(sub, "access", _ACCESS_TOKEN_EXPIRE))

    async def get_current_user(self, session: AsyncSession, token: str) -> User:
        """Decode an access token and return the corresponding user.

        Raises :class:`AuthenticationError` on invalid token or unknown user.
        """
        sub = _decode(token, "access")
        try:
            user_id = uuid.UUID(sub)
        except ValueError:
            raise AuthenticationError("invalid token payload")

        user = await self._user_dao.get_by_id(session, user_id)
        if user is None:
            raise AuthenticationError("user not found")
        return user

    # -- Onboarding --------------------------------------------------------

    async def complete_onboarding(self, session: AsyncSession, user: User) -> User:
        """Mark *user* as onboarded. Idempotent."""
        if user.onboarding_complete:
            return user
        updated = await self._user_dao.mark_onboarding_complete(session, user.id)
        if updated is None:
            raise AuthenticationError("user not found")
        log.info("auth.onboarding_completed", user_id=str(user.id))
        return updated
