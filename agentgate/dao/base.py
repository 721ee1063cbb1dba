"""Generic base DAO — CRUD (ORM) + offset pagination primitives."""

import math
import uuid
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)

PAGE_SIZE_MIN = 1
PAGE_SIZE_MAX = 100
PAGE_SIZE_DEFAULT = 20

SortDirection = Literal["asc", "desc"]


def _clamp_page_size(page_size: int) -> int:
    return max(PAGE_SIZE_MIN, min(page_size, PAGE_SIZE_MAX))


@dataclass(frozen=True)
class Pagination:
    """Offset/limit window requested by the caller."""

    limit: int = PAGE_SIZE_DEFAULT
    offset: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "limit", _clamp_page_size(self.limit))
        object.__setattr__(self, "offset", max(0, self.offset))


@dataclass(frozen=True)
class Sorting:
    """Requested sort key and direction. Keys are API field names (camelCase)."""

    sort_by: str | None = None
    sort_direction: SortDirection | None = None


@dataclass
class PaginatedResult(Generic[ModelT]):
    """One offset page plus the total row count under the same filter."""

    items: list[ModelT]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def has_prev(self) -> bool:
        return self.offset > 0

    @classmethod
    def empty(cls, pagination: Pagination) -> "PaginatedResult[ModelT]":
        return cls(items=[], total=0, limit=pagination.limit, offset=pagination.offset)


def create_paginated_result(
    items: list[ModelT], total: int, pagination: Pagination
) -> PaginatedResult[ModelT]:
    return PaginatedResult(
        items=items, total=total, limit=pagination.limit, offset=pagination.offset
    )


class BaseDAO(Generic[ModelT]):
    """Base data-access object. Subclasses set ``model`` class attribute."""

    model: type[ModelT]

    # ── ORM methods ──────────────────────────────────────────────────────

    @staticmethod
    def _require_pk(pk: uuid.UUID) -> None:
        """Raise ValueError if *pk* is None."""
        if pk is None:
            raise ValueError("pk must not be None")

    async def get_by_id(self, session: AsyncSession, pk: uuid.UUID) -> ModelT | None:
        self._require_pk(pk)
        return await session.get(self.model, pk)

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def update(self, session: AsyncSession, pk: uuid.UUID, **values: Any) -> ModelT | None:
        self._require_pk(pk)
        obj = await session.get(self.model, pk)
        if obj is None:
            return None
        immutable = {"id", "created_at", "updated_at"}
        column_keys = set(self.model.__mapper__.column_attrs.keys())
        for key in values:
            if key in immutable:
                raise AttributeError(f"'{key}' is immutable and cannot be updated")
            if key not in column_keys:
                raise AttributeError(f"{self.model.__name__} has no column '{key}'")
        for key, val in values.items():
            setattr(obj, key, val)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, pk: uuid.UUID) -> bool:
        """Delete a row by id. Dependent rows go with it via ON DELETE CASCADE."""
        self._require_pk(pk)
        obj = await session.get(self.model, pk)
        if obj is None:
            return False
        await session.delete(obj)
        await session.flush()
        return True

    async def get_by_field(self, session: AsyncSession, **filters: Any) -> ModelT | None:
        """Return the first row matching all *filters*, or None.

        Usage::

            user = await dao.get_by_field(session, email="alice@example.com")

        Raises ``ValueError`` if called without any filters.
        """
        if not filters:
            raise ValueError("get_by_field() requires at least one filter")
        stmt = select(self.model)
        for key, val in filters.items():
            stmt = stmt.where(getattr(self.model, key) == val)
        result = await session.execute(stmt)
        return result.scalars().first()
