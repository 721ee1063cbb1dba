"""Seed a demo dataset: one team, a member user, agents and recorded tool calls.

Creates missing tables first, so it can be pointed at an empty database.
Agents are assigned to the demo team except the last one, which stays
visible to admins only.
"""

import asyncio
import os
import sys
import uuid
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from agentgate.core.database import Base
from agentgate.dao.agent_dao import AgentDAO
from agentgate.dao.agent_team_dao import AgentTeamDAO
from agentgate.dao.mcp_tool_call_dao import McpToolCallDAO
from agentgate.dao.team_dao import TeamDAO
from agentgate.dao.user_dao import UserDAO
from agentgate.models.user import ROLE_MEMBER
from agentgate.services.auth_service import hash_password
from agentgate.services.mcp_tool_call_service import McpToolCallService

AGENTS = ["support-bot", "release-helper", "admin-only-auditor"]
SERVERS = ["github", "filesystem", "slack"]
CALLS_PER_AGENT = 5


async def main() -> None:
    url = os.environ.get("AGENTGATE_DATABASE_URL", "postgresql+asyncpg://localhost/agentgate")
    engine = create_async_engine(url, pool_pre_ping=True)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    agent_dao = AgentDAO()
    agent_team_dao = AgentTeamDAO()
    team_dao = TeamDAO()
    user_dao = UserDAO()
    service = McpToolCallService(McpToolCallDAO(agent_team_dao))

    async with factory() as session:
        team = await team_dao.get_by_field(session, name="demo")
        if team is None:
            team = await team_dao.create(session, name="demo", description="Demo team")

        member = await user_dao.upsert(
            session,
            username="demo",
            email="demo@example.com",
            password_hash=hash_password(os.environ.get("AGENTGATE_DEMO_PASSWORD", "demo")),
            role=ROLE_MEMBER,
        )
        await team_dao.add_member(session, team.id, member.id)

        recorded = 0
        for idx, name in enumerate(AGENTS):
            agent = await agent_dao.create(session, name=name)
            if idx < len(AGENTS) - 1:
                await agent_team_dao.assign_agent_to_team(session, agent.id, team.id)
            for n in range(CALLS_PER_AGENT):
                call_id = f"call_{uuid.uuid4().hex[:12]}"
                await service.record(
                    session,
                    agent_id=agent.id,
                    mcp_server_name=SERVERS[n % len(SERVERS)],
                    tool_call={"id": call_id, "name": "search", "arguments": {"q": f"{name} #{n}"}},
                    tool_result={
                        "id": call_id,
                        "content": [{"type": "text", "text": "ok"}],
                        "isError": n == CALLS_PER_AGENT - 1,
                        **({"error": "upstream timeout"} if n == CALLS_PER_AGENT - 1 else {}),
                    },
                )
                recorded += 1
        await session.commit()

    print(f"Done: {len(AGENTS)} agents, {recorded} tool calls, team 'demo' (user demo@example.com).")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
