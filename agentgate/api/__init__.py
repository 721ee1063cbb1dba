"""AgentGate REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentgate.api.deps import dispose_engine, get_auth_service, init_session_factory
from agentgate.api.errors import register_error_handlers
from agentgate.api.middleware.request_id import RequestIDMiddleware
from agentgate.api.routers import auth, mcp_tool_calls, onboarding
from agentgate.core.logging import setup_logging
from agentgate.web import logs

log = structlog.get_logger("agentgate")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB pool, ensure admin. Shutdown: dispose engine."""
    factory = init_session_factory()
    async with factory() as session:
        async with session.begin():
            await get_auth_service().ensure_admin_exists(session)
    log.info("app.started")
    yield
    await dispose_engine()
    log.info("app.stopped")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="AgentGate",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("AGENTGATE_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(onboarding.router, prefix="/api/onboarding", tags=["onboarding"])
    app.include_router(
        mcp_tool_calls.router, prefix="/api/mcp-tool-calls", tags=["MCP Tool Call"]
    )
    app.include_router(logs.router)

    return app
