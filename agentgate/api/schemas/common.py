"""Shared pagination / sorting / error schemas."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

from agentgate.dao.base import PaginatedResult
from agentgate.models.tool_payloads import CamelModel

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]


class PaginatedResponse(CamelModel, Generic[T]):
    """Generic offset-paginated list response."""

    items: list[T]
    total: int
    limit: int
    offset: int
    page: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_result(cls, result: PaginatedResult, items: list[T]) -> "PaginatedResponse[T]":
        return cls(
            items=items,
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            page=result.page,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        )


class ErrorDetail(BaseModel):
    message: str
    type: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
