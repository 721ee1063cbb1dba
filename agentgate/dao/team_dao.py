"""TeamDAO — teams and team membership."""

import uuid

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.dao.base import BaseDAO
from agentgate.models.team import Team, TeamMember


class TeamDAO(BaseDAO[Team]):
    model = Team

    async def add_member(
        self, session: AsyncSession, team_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        """Add *user_id* to *team_id*; a no-op if already a member."""
        stmt = (
            insert(TeamMember)
            .values(team_id=team_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["team_id", "user_id"])
        )
        await session.execute(stmt)

    async def remove_member(
        self, session: AsyncSession, team_id: uuid.UUID, user_id: uuid.UUID
    ) -> bool:
        member = await session.get(TeamMember, (team_id, user_id))
        if member is None:
            return False
        await session.delete(member)
        await session.flush()
        return True
