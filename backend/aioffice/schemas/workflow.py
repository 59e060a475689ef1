"""Pydantic schemas for workflow documents.

Nodes and edges are accepted as free-form editor objects. Their shape is
checked when a run builds the graph, not when the document is stored.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Required at runtime for Pydantic
from typing import Any
from uuid import UUID  # noqa: TC003 - Required at runtime for Pydantic

from pydantic import Field

from aioffice.schemas.base import BaseSchema


class WorkflowCreate(BaseSchema):
    """Schema for storing a workflow document."""

    office_id: UUID = Field(
        ...,
        alias="officeId",
        description="Office (tenant) owning the workflow",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name",
        examples=["Weekly report"],
    )
    description: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional description",
    )
    nodes: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Editor nodes: {id, type, position, data}",
        examples=[[{"id": "start-1", "type": "start", "data": {}}]],
    )
    edges: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Editor edges: {id, source, target, sourceHandle}",
        examples=[[{"id": "e1", "source": "start-1", "target": "end-1"}]],
    )
    is_active: bool = Field(
        default=True,
        description="Whether the workflow is active",
    )


class WorkflowResponse(BaseSchema):
    """Schema for a stored workflow document."""

    id: UUID
    office_id: UUID
    name: str
    description: str | None = None
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime


__all__ = [
    "WorkflowCreate",
    "WorkflowResponse",
]
