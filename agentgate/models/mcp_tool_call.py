"""mcp_tool_calls table — append-only audit log of gateway tool calls."""

import uuid

from sqlalchemy import VARCHAR, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from agentgate.core.database import Base, CreatedAtMixin


class McpToolCall(CreatedAtMixin, Base):
    __tablename__ = "mcp_tool_calls"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
    )
    mcp_server_name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    # {"id", "name", "arguments"}
    tool_call: Mapped[dict] = mapped_column(JSONB, nullable=False)
    # {"id", "content", "isError", "error"?}
    tool_result: Mapped[dict] = mapped_column(JSONB, nullable=False)

    __table_args__ = (
        Index("mcp_tool_calls_agent_id_idx", "agent_id"),
        Index("mcp_tool_calls_created_at_idx", "created_at"),
    )
