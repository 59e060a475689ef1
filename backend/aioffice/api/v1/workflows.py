"""Workflow document API router.

Stores the editor's node and edge arrays so they can be executed by
``POST /runs``.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from aioffice.api.deps import (  # noqa: TC001 - Required at runtime for FastAPI
    DBSession,
    Pagination,
)
from aioffice.schemas.base import ErrorResponse, PaginatedResponse
from aioffice.schemas.workflow import WorkflowCreate, WorkflowResponse
from aioffice.services.workflow_service import WorkflowService

router = APIRouter()


@router.post(
    "",
    response_model=WorkflowResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create workflow",
    description="Store a workflow document.",
)
async def create_workflow(
    db: DBSession,
    data: WorkflowCreate,
) -> WorkflowResponse:
    """Create a new workflow document.

    Args:
        db: Database session.
        data: Workflow document.

    Returns:
        The stored workflow.
    """
    workflow = await WorkflowService(db).create(data)
    return WorkflowResponse.model_validate(workflow)


@router.get(
    "",
    response_model=PaginatedResponse[WorkflowResponse],
    summary="List workflows",
    description="Retrieve a paginated list of workflows, optionally for one office.",
)
async def list_workflows(
    db: DBSession,
    pagination: Pagination,
    office_id: Annotated[
        UUID | None,
        Query(description="Filter by office"),
    ] = None,
    is_active: Annotated[
        bool | None,
        Query(description="Filter by active status"),
    ] = None,
) -> PaginatedResponse[WorkflowResponse]:
    """List workflows with pagination and optional filtering."""
    workflow_service = WorkflowService(db)
    workflows = await workflow_service.list(
        office_id=office_id,
        skip=pagination.skip,
        limit=pagination.limit,
        is_active=is_active,
    )
    total = await workflow_service.count(office_id=office_id, is_active=is_active)

    return PaginatedResponse.create(
        items=[WorkflowResponse.model_validate(workflow) for workflow in workflows],
        total=total,
        page=pagination.page,
        size=pagination.limit,
    )


@router.get(
    "/{workflow_id}",
    response_model=WorkflowResponse,
    summary="Get workflow",
    description="Retrieve a stored workflow document.",
    responses={404: {"model": ErrorResponse, "description": "Workflow not found"}},
)
async def get_workflow(
    db: DBSession,
    workflow_id: UUID,
) -> WorkflowResponse:
    """Get a workflow by ID.

    Raises:
        HTTPException: 404 if the workflow is not found.
    """
    workflow = await WorkflowService(db).get(workflow_id)
    if workflow is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workflow not found",
        )
    return WorkflowResponse.model_validate(workflow)
