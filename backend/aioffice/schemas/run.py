"""Pydantic schemas for workflow runs.

The invocation body uses the editor's camelCase keys. Both identifiers
are optional at the schema level so a missing one produces the 400
response the client expects rather than a validation error.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Required at runtime for Pydantic
from typing import Any
from uuid import UUID  # noqa: TC003 - Required at runtime for Pydantic

from pydantic import Field

from aioffice.models.enums import RunStatus
from aioffice.schemas.base import BaseSchema


class RunCreate(BaseSchema):
    """Request body for starting a run."""

    workflow_id: str | None = Field(
        default=None,
        alias="workflowId",
        description="Workflow to execute",
        examples=["550e8400-e29b-41d4-a716-446655440001"],
    )
    office_id: str | None = Field(
        default=None,
        alias="officeId",
        description="Office (tenant) the run belongs to",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    input: dict[str, Any] | None = Field(
        default=None,
        description="Initial run variables",
        examples=[{"score": 85, "customer": "Acme"}],
    )


class RunAccepted(BaseSchema):
    """Response for an accepted run."""

    success: bool = True
    run_id: UUID = Field(..., serialization_alias="runId")
    message: str = "Workflow execution started"


class WorkflowRunResponse(BaseSchema):
    """Schema for a run record as seen by pollers."""

    id: UUID
    workflow_id: UUID
    office_id: UUID
    status: RunStatus
    progress: int = Field(..., ge=0, le=100)
    current_node_id: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    result: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


__all__ = [
    "RunAccepted",
    "RunCreate",
    "WorkflowRunResponse",
]
