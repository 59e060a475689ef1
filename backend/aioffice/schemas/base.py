"""Shared schema building blocks.

``BaseSchema`` carries the model config every request and response
schema uses. ``PaginatedResponse`` wraps list endpoints and
``ErrorResponse`` documents the ``HTTPException`` body in OpenAPI.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema: reads ORM objects, accepts field names or aliases."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class PaginatedResponse(BaseSchema, Generic[T]):
    """One page of a list endpoint.

    Attributes:
        items: Records on this page.
        total: Records matching the filters across all pages.
        page: 1-indexed page number derived from skip and limit.
        size: Page size (the ``limit`` query parameter).
        pages: Number of pages for ``total`` at this size.
    """

    items: list[T]
    total: int = Field(..., ge=0, examples=[42])
    page: int = Field(..., ge=1, examples=[1])
    size: int = Field(..., ge=1, examples=[20])
    pages: int = Field(..., ge=0, examples=[3])

    @classmethod
    def create(
        cls,
        items: list[T],
        total: int,
        page: int,
        size: int,
    ) -> PaginatedResponse[T]:
        """Build a page, computing ``pages`` by ceiling division."""
        return cls(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=-(-total // size) if size > 0 else 0,
        )


class ErrorResponse(BaseSchema):
    """Body of an error response."""

    detail: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Workflow not found"],
    )


__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "PaginatedResponse",
]
