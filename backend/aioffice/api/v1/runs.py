"""Workflow run API router.

Starting a run returns as soon as the run row exists; clients poll
``GET /runs/{run_id}`` for progress and the final result.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from aioffice.api.deps import (  # noqa: TC001 - Required at runtime for FastAPI
    DBSession,
    Pagination,
    Runner,
)
from aioffice.core.exceptions import AppError
from aioffice.core.logging import get_logger
from aioffice.models.enums import RunStatus
from aioffice.schemas.base import ErrorResponse, PaginatedResponse
from aioffice.schemas.run import RunAccepted, RunCreate, WorkflowRunResponse
from aioffice.services.run_service import RunService

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=RunAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start workflow run",
    description="Create a run for a stored workflow and execute it in the background.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid run request"},
        404: {"model": ErrorResponse, "description": "Workflow not found"},
        500: {"model": ErrorResponse, "description": "Run could not be created"},
    },
)
async def start_run(
    db: DBSession,
    runner: Runner,
    data: RunCreate,
) -> RunAccepted:
    """Start a workflow run.

    Args:
        db: Database session.
        runner: Workflow runner.
        data: Workflow id, office id and optional input variables.

    Returns:
        The accepted run id.

    Raises:
        HTTPException: 400 if an identifier is missing or the workflow has
            no nodes, 404 if the workflow does not exist, 500 if the run
            could not be created.
    """
    try:
        handle = await runner.start(
            db,
            workflow_id=data.workflow_id,
            office_id=data.office_id,
            input_data=data.input,
        )
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error starting run: {e}",
            exc_info=True,
            extra={"context": {"workflow_id": data.workflow_id}},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to start workflow run: {e!s}",
        ) from e

    return RunAccepted(run_id=handle.run_id)


@router.get(
    "",
    response_model=PaginatedResponse[WorkflowRunResponse],
    summary="List runs",
    description="Retrieve a paginated list of runs, newest first.",
)
async def list_runs(
    db: DBSession,
    pagination: Pagination,
    workflow_id: Annotated[
        UUID | None,
        Query(description="Filter by workflow"),
    ] = None,
    office_id: Annotated[
        UUID | None,
        Query(description="Filter by office"),
    ] = None,
    run_status: Annotated[
        RunStatus | None,
        Query(alias="status", description="Filter by run status"),
    ] = None,
) -> PaginatedResponse[WorkflowRunResponse]:
    """List runs with pagination and optional filtering."""
    runs = await RunService.list(
        db,
        workflow_id=workflow_id,
        office_id=office_id,
        status=run_status,
        skip=pagination.skip,
        limit=pagination.limit,
    )
    total = await RunService.count(
        db,
        workflow_id=workflow_id,
        office_id=office_id,
        status=run_status,
    )

    return PaginatedResponse.create(
        items=[WorkflowRunResponse.model_validate(run) for run in runs],
        total=total,
        page=pagination.page,
        size=pagination.limit,
    )


@router.get(
    "/{run_id}",
    response_model=WorkflowRunResponse,
    summary="Get run",
    description="Retrieve the current state of a run.",
    responses={404: {"model": ErrorResponse, "description": "Run not found"}},
)
async def get_run(
    db: DBSession,
    run_id: UUID,
) -> WorkflowRunResponse:
    """Get a run by ID.

    Raises:
        HTTPException: 404 if the run is not found.
    """
    run = await RunService.get(db, run_id)
    if run is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Run not found",
        )
    return WorkflowRunResponse.model_validate(run)
