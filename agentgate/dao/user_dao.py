"""UserDAO — users table operations."""

import uuid

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.dao.base import BaseDAO
from agentgate.models.user import ROLE_ADMIN, User


class UserDAO(BaseDAO[User]):
    model = User

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        """Look up a user by email (sign-in flow)."""
        return await self.get_by_field(session, email=email)

    async def upsert(
        self,
        session: AsyncSession,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: str = ROLE_ADMIN,
    ) -> User | None:
        """Insert a user or do nothing if username already exists.

        Used at startup to ensure the initial admin account exists.
        Returns the inserted row, or the existing one on conflict.
        """
        stmt = (
            insert(User)
            .values(
                username=username,
                email=email,
                password_hash=password_hash,
                role=role,
            )
            .on_conflict_do_nothing(index_elements=["username"])
            .returning(User)
        )
        result = await session.execute(stmt)
        row = result.scalars().first()
        if row is None:
            return await self.get_by_field(session, username=username)
        return row

    async def mark_onboarding_complete(self, session: AsyncSession, user_id: uuid.UUID) -> User | None:
        return await self.update(session, user_id, onboarding_complete=True)
