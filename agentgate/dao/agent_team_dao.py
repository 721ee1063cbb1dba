"""AgentTeamDAO — agent-to-team assignment and agent visibility checks.

Visibility rule: an admin sees every agent; anyone else sees exactly the
agents assigned to a team they are a member of. Nothing here is cached,
every call reflects the current memberships.
"""

import uuid

from sqlalchemy import select
from sqlalchemy import exists as sa_exists
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.models.agent import Agent
from agentgate.models.team import AgentTeam, TeamMember


class AgentTeamDAO:
    async def assign_agent_to_team(
        self, session: AsyncSession, agent_id: uuid.UUID, team_id: uuid.UUID
    ) -> None:
        """Assign an agent to a team; a no-op if already assigned."""
        stmt = (
            insert(AgentTeam)
            .values(agent_id=agent_id, team_id=team_id)
            .on_conflict_do_nothing(index_elements=["agent_id", "team_id"])
        )
        await session.execute(stmt)

    async def get_user_accessible_agent_ids(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        is_admin: bool = False,
    ) -> list[uuid.UUID]:
        """Return the ids of every agent *user_id* may see."""
        if is_admin:
            stmt = select(Agent.id)
        else:
            stmt = (
                select(AgentTeam.agent_id)
                .join(TeamMember, TeamMember.team_id == AgentTeam.team_id)
                .where(TeamMember.user_id == user_id)
                .distinct()
            )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def user_has_agent_access(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        agent_id: uuid.UUID,
        is_admin: bool = False,
    ) -> bool:
        if is_admin:
            return True
        stmt = select(
            sa_exists()
            .where(AgentTeam.agent_id == agent_id)
            .where(TeamMember.team_id == AgentTeam.team_id)
            .where(TeamMember.user_id == user_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one()
