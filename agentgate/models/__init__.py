"""SQLAlchemy ORM models — one file per table."""

from agentgate.models.agent import Agent
from agentgate.models.mcp_tool_call import McpToolCall
from agentgate.models.team import AgentTeam, Team, TeamMember
from agentgate.models.user import User

__all__ = [
    "Agent",
    "AgentTeam",
    "McpToolCall",
    "Team",
    "TeamMember",
    "User",
]
