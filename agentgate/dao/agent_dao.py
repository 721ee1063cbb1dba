"""AgentDAO — agents table operations."""

from agentgate.dao.base import BaseDAO
from agentgate.models.agent import Agent


class AgentDAO(BaseDAO[Agent]):
    model = Agent
