"""MCP tool call request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from agentgate.models.tool_payloads import CamelModel, CommonToolCall, CommonToolResult

McpToolCallSortField = Literal["createdAt", "agentId", "mcpServerName"]


class McpToolCallResponse(CamelModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    agent_id: uuid.UUID
    mcp_server_name: str
    tool_call: CommonToolCall
    tool_result: CommonToolResult
    created_at: datetime
