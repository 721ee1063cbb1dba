"""JSON payload types stored in ``mcp_tool_calls``.

These pydantic models are the one definition of the ``tool_call`` /
``tool_result`` JSONB shapes. The insert path validates through them and
the API response schemas embed them, so storage and wire formats cannot
drift apart.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CommonToolCall(CamelModel):
    id: str
    name: str
    arguments: dict[str, Any]


class CommonToolResult(CamelModel):
    id: str
    content: Any = None
    is_error: bool
    error: str | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_error(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # "error" is optional, never null; "content" may be null.
        data = handler(self)
        if self.error is None:
            data.pop("error", None)
        return data


class InsertMcpToolCall(CamelModel):
    """Values accepted by ``McpToolCallDAO.create``.

    ``id`` is always generated by the database; ``created_at`` defaults to
    the insert time but may be supplied (backfills, tests).
    """

    agent_id: uuid.UUID
    mcp_server_name: str = Field(min_length=1, max_length=255)
    tool_call: CommonToolCall
    tool_result: CommonToolResult
    created_at: datetime | None = None

    def to_row(self) -> dict[str, Any]:
        """Column values for the insert, JSON payloads in their stored (camelCase) form."""
        row: dict[str, Any] = {
            "agent_id": self.agent_id,
            "mcp_server_name": self.mcp_server_name,
            "tool_call": self.tool_call.model_dump(by_alias=True, mode="json"),
            "tool_result": self.tool_result.model_dump(by_alias=True, mode="json"),
        }
        if self.created_at is not None:
            row["created_at"] = self.created_at
        return row
