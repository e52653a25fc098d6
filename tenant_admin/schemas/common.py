# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Common schema types and the response envelope."""
import math
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaginationParams(BaseModel):
    """Page, limit and free text search accepted by every list endpoint."""

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    search: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    """Pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    message: str = "Success"
    data: T | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated success envelope."""

    success: bool = True
    message: str = "Success"
    data: list[T]
    pagination: PaginationMeta
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def build(
        cls,
        items: list[Any],
        params: PaginationParams,
        total: int,
        message: str = "Success",
    ) -> "PaginatedResponse[T]":
        return cls(
            message=message,
            data=items,
            pagination=PaginationMeta.build(params.page, params.limit, total),
        )


class FieldError(BaseModel):
    """A single validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    message: str
    error: str | None = None
    errors: list[FieldError] | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
