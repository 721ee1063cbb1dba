"""McpToolCallDAO — mcp_tool_calls table operations.

Every read path applies the same visibility rule:

- no caller (``user_id is None``) or an admin caller: unfiltered;
- any other caller: only rows whose ``agent_id`` is in the caller's
  accessible-agent set, resolved fresh through :class:`AgentTeamDAO`.

Paginated reads issue the page query and the count query concurrently,
each on its own ``AsyncSession`` from the injected session factory.
"""

import asyncio
import uuid
from collections.abc import Sequence

from sqlalchemy import Select, asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.expression import ColumnElement, UnaryExpression

from agentgate.dao.agent_team_dao import AgentTeamDAO
from agentgate.dao.base import (
    BaseDAO,
    PaginatedResult,
    Pagination,
    Sorting,
    create_paginated_result,
)
from agentgate.models.mcp_tool_call import McpToolCall
from agentgate.models.tool_payloads import InsertMcpToolCall

# API sort key -> column
SORT_COLUMNS = {
    "createdAt": McpToolCall.created_at,
    "agentId": McpToolCall.agent_id,
    "mcpServerName": McpToolCall.mcp_server_name,
}


def resolve_order_by(sorting: Sorting | None) -> tuple[UnaryExpression, ...]:
    """Map a sort request onto ORDER BY terms. Never raises.

    Unknown or missing keys fall back to newest first. ``id`` is appended
    in the same direction so rows with equal sort values keep a stable
    order across offset windows.
    """
    column = SORT_COLUMNS.get(sorting.sort_by) if sorting and sorting.sort_by else None
    if column is None:
        return (desc(McpToolCall.created_at), desc(McpToolCall.id))
    direction = asc if sorting.sort_direction == "asc" else desc
    return (direction(column), direction(McpToolCall.id))


class McpToolCallDAO(BaseDAO[McpToolCall]):
    model = McpToolCall

    def __init__(self, agent_team_dao: AgentTeamDAO) -> None:
        self._agent_team_dao = agent_team_dao

    async def create(self, session: AsyncSession, data: InsertMcpToolCall) -> McpToolCall:  # type: ignore[override]
        """Insert one record and return it with its generated id / created_at.

        A dangling ``agent_id`` fails at flush with ``IntegrityError``.
        """
        return await super().create(session, **data.to_row())

    # ── visibility ───────────────────────────────────────────────────────

    async def _visibility_filter(
        self,
        session: AsyncSession,
        user_id: uuid.UUID | None,
        is_admin: bool,
    ) -> list[ColumnElement[bool]] | None:
        """Return WHERE terms for the caller, or None if they can see nothing."""
        if user_id is None or is_admin:
            return []
        agent_ids = await self._agent_team_dao.get_user_accessible_agent_ids(
            session, user_id, False
        )
        if not agent_ids:
            return None
        return [McpToolCall.agent_id.in_(agent_ids)]

    # ── queries ──────────────────────────────────────────────────────────

    async def find_all(
        self,
        session: AsyncSession,
        user_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> list[McpToolCall]:
        """All visible records, newest first."""
        where = await self._visibility_filter(session, user_id, is_admin)
        if where is None:
            return []
        stmt = (
            select(McpToolCall)
            .where(*where)
            .order_by(desc(McpToolCall.created_at), desc(McpToolCall.id))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def find_all_paginated(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        pagination: Pagination,
        sorting: Sorting | None = None,
        user_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> PaginatedResult[McpToolCall]:
        """One sorted page of visible records plus the visible total."""
        if user_id is None or is_admin:
            where: list[ColumnElement[bool]] | None = []
        else:
            async with session_factory() as session:
                where = await self._visibility_filter(session, user_id, is_admin)
        if where is None:
            return PaginatedResult.empty(pagination)
        return await self._fetch_page(session_factory, where, pagination, sorting)

    async def find_by_id(
        self,
        session: AsyncSession,
        mcp_tool_call_id: uuid.UUID,
        user_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> McpToolCall | None:
        """Return the record, or None if it does not exist *or* the caller may not see it."""
        record = await self.get_by_id(session, mcp_tool_call_id)
        if record is None:
            return None
        if user_id is not None and not is_admin:
            allowed = await self._agent_team_dao.user_has_agent_access(
                session, user_id, record.agent_id, False
            )
            if not allowed:
                return None
        return record

    async def get_all_mcp_tool_calls_for_agent(
        self,
        session: AsyncSession,
        agent_id: uuid.UUID,
        extra_filters: Sequence[ColumnElement[bool]] | None = None,
    ) -> list[McpToolCall]:
        """All records of one agent, oldest first."""
        stmt = (
            select(McpToolCall)
            .where(McpToolCall.agent_id == agent_id, *(extra_filters or ()))
            .order_by(asc(McpToolCall.created_at), asc(McpToolCall.id))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_all_mcp_tool_calls_for_agent_paginated(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        agent_id: uuid.UUID,
        pagination: Pagination,
        sorting: Sorting | None = None,
        extra_filters: Sequence[ColumnElement[bool]] | None = None,
    ) -> PaginatedResult[McpToolCall]:
        where = [McpToolCall.agent_id == agent_id, *(extra_filters or ())]
        return await self._fetch_page(session_factory, where, pagination, sorting)

    # ── helpers ──────────────────────────────────────────────────────────

    async def _fetch_page(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        where: Sequence[ColumnElement[bool]],
        pagination: Pagination,
        sorting: Sorting | None,
    ) -> PaginatedResult[McpToolCall]:
        page_stmt: Select = (
            select(McpToolCall)
            .where(*where)
            .order_by(*resolve_order_by(sorting))
            .limit(pagination.limit)
            .offset(pagination.offset)
        )
        count_stmt: Select = select(func.count()).select_from(McpToolCall).where(*where)

        async def _rows() -> list[McpToolCall]:
            async with session_factory() as session:
                result = await session.execute(page_stmt)
                return list(result.scalars().all())

        async def _total() -> int:
            async with session_factory() as session:
                result = await session.execute(count_stmt)
                return int(result.scalar_one())

        items, total = await asyncio.gather(_rows(), _total())
        return create_paginated_result(items, total, pagination)
