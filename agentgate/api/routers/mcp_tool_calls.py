"""MCP tool calls router — read-only access to the gateway audit log."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agentgate.api.deps import (
    get_current_user,
    get_mcp_tool_call_service,
    get_session,
    get_session_factory,
)
from agentgate.api.schemas.common import ErrorResponse, PaginatedResponse, SortDirection
from agentgate.api.schemas.mcp_tool_call import McpToolCallResponse, McpToolCallSortField
from agentgate.dao.base import PAGE_SIZE_DEFAULT, PAGE_SIZE_MAX, PAGE_SIZE_MIN, Pagination, Sorting
from agentgate.models.user import User
from agentgate.services.mcp_tool_call_service import McpToolCallService

router = APIRouter()


@router.get(
    "",
    response_model=PaginatedResponse[McpToolCallResponse],
    responses={401: {"model": ErrorResponse}},
    operation_id="getMcpToolCalls",
    summary="Get all MCP tool calls with pagination and sorting",
)
async def list_mcp_tool_calls(
    agent_id: uuid.UUID | None = Query(None, alias="agentId", description="Filter by agent ID"),
    limit: int = Query(PAGE_SIZE_DEFAULT, ge=PAGE_SIZE_MIN, le=PAGE_SIZE_MAX),
    offset: int = Query(0, ge=0),
    sort_by: McpToolCallSortField | None = Query(None, alias="sortBy"),
    sort_direction: SortDirection | None = Query(None, alias="sortDirection"),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    user: User = Depends(get_current_user),
    svc: McpToolCallService = Depends(get_mcp_tool_call_service),
) -> PaginatedResponse[McpToolCallResponse]:
    result = await svc.list(
        session_factory,
        pagination=Pagination(limit=limit, offset=offset),
        sorting=Sorting(sort_by=sort_by, sort_direction=sort_direction),
        agent_id=agent_id,
        user_id=user.id,
        is_admin=user.is_admin,
    )
    return PaginatedResponse[McpToolCallResponse].from_result(
        result, [McpToolCallResponse.model_validate(item) for item in result.items]
    )


@router.get(
    "/{mcp_tool_call_id}",
    response_model=McpToolCallResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    operation_id="getMcpToolCall",
    summary="Get MCP tool call by ID",
)
async def get_mcp_tool_call(
    mcp_tool_call_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: McpToolCallService = Depends(get_mcp_tool_call_service),
) -> McpToolCallResponse:
    record = await svc.get(session, mcp_tool_call_id, user_id=user.id, is_admin=user.is_admin)
    return McpToolCallResponse.model_validate(record)
