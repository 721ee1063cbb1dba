"""Dependency injection — engine, sessions, auth, and service instances.

Nothing here is created at import time except the stateless DAO/service
objects; the engine and session factory are built by the app lifespan
(:func:`init_session_factory`) and torn down by :func:`dispose_engine`.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentgate.dao.agent_team_dao import AgentTeamDAO
from agentgate.dao.mcp_tool_call_dao import McpToolCallDAO
from agentgate.dao.user_dao import UserDAO
from agentgate.models.user import User
from agentgate.services import AuthenticationError
from agentgate.services.auth_service import AuthService
from agentgate.services.mcp_tool_call_service import McpToolCallService

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/agentgate"

# ---------------------------------------------------------------------------
# DAO / service instances (stateless)
# ---------------------------------------------------------------------------
_user_dao = UserDAO()
_agent_team_dao = AgentTeamDAO()
_mcp_tool_call_dao = McpToolCallDAO(_agent_team_dao)

_auth_service = AuthService(_user_dao)
_mcp_tool_call_service = McpToolCallService(_mcp_tool_call_dao)

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    url = database_url or os.environ.get("AGENTGATE_DATABASE_URL", DEFAULT_DATABASE_URL)
    _engine = create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,
    )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory (for handlers that open their own sessions)."""
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    return _session_factory


async def get_session(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    async with factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)


def get_auth_service() -> AuthService:
    return _auth_service


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Extract and validate the Bearer token, return the authenticated User."""
    if credentials is None:
        raise AuthenticationError("Unauthorized")
    return await auth.get_current_user(session, credentials.credentials)


# ---------------------------------------------------------------------------
# Service getters (for Depends())
# ---------------------------------------------------------------------------


def get_mcp_tool_call_service() -> McpToolCallService:
    return _mcp_tool_call_service
