"""Shared API envelopes: every success body is {success, message, data}."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    message: str | None = None
    data: T


class Page(BaseModel, Generic[T]):
    """One page of a list plus pagination metadata."""

    items: list[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, items: list[T], total: int, page: int, limit: int) -> "Page[T]":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(items=items, total=total, page=page, limit=limit, pages=pages)


def ok(data: T, message: str | None = None) -> ApiResponse[T]:
    """Wrap data in the success envelope."""
    return ApiResponse(data=data, message=message)


class PageParams(BaseModel):
    """Query parameters for paginated lists."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
