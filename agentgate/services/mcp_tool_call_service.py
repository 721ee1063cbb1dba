"""McpToolCallService — recording and browsing the MCP gateway audit log."""

from __future__ import annotations

import uuid
from typing import Any

import pydantic
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agentgate.dao.base import PaginatedResult, Pagination, Sorting
from agentgate.dao.mcp_tool_call_dao import McpToolCallDAO
from agentgate.models.mcp_tool_call import McpToolCall
from agentgate.models.tool_payloads import InsertMcpToolCall
from agentgate.services import NotFoundError, ValidationError

log = structlog.get_logger("agentgate.mcp_tool_calls")


class McpToolCallService:
    """Stateless service over :class:`McpToolCallDAO`."""

    def __init__(self, mcp_tool_call_dao: McpToolCallDAO) -> None:
        self._dao = mcp_tool_call_dao

    async def record(
        self,
        session: AsyncSession,
        *,
        agent_id: uuid.UUID,
        mcp_server_name: str,
        tool_call: dict[str, Any],
        tool_result: dict[str, Any],
    ) -> McpToolCall:
        """Persist one completed tool invocation.

        Raises :class:`ValidationError` if either payload does not match the
        stored shape.
        """
        try:
            data = InsertMcpToolCall(
                agent_id=agent_id,
                mcp_server_name=mcp_server_name,
                tool_call=tool_call,
                tool_result=tool_result,
            )
        except pydantic.ValidationError as exc:
            raise ValidationError(f"invalid tool call payload: {exc.error_count()} error(s)") from exc

        record = await self._dao.create(session, data)
        log.info(
            "mcp_tool_call.recorded",
            mcp_tool_call_id=str(record.id),
            agent_id=str(agent_id),
            mcp_server_name=mcp_server_name,
            tool_name=data.tool_call.name,
            is_error=data.tool_result.is_error,
        )
        return record

    async def list(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        pagination: Pagination,
        sorting: Sorting | None = None,
        agent_id: uuid.UUID | None = None,
        user_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> PaginatedResult[McpToolCall]:
        """Return one page of tool calls.

        With *agent_id* the agent-scoped query is used as is; the caller's
        wider visibility filter is not re-applied on that path.
        """
        if agent_id is not None:
            return await self._dao.get_all_mcp_tool_calls_for_agent_paginated(
                session_factory, agent_id, pagination, sorting
            )
        return await self._dao.find_all_paginated(
            session_factory, pagination, sorting, user_id, is_admin
        )

    async def get(
        self,
        session: AsyncSession,
        mcp_tool_call_id: uuid.UUID,
        *,
        user_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> McpToolCall:
        """Return a tool call by ID.

        Raises :class:`NotFoundError` if it does not exist or the caller
        cannot see it; the two cases are indistinguishable.
        """
        record = await self._dao.find_by_id(session, mcp_tool_call_id, user_id, is_admin)
        if record is None:
            raise NotFoundError("MCP tool call not found")
        return record
