"""Read access to workflow runs.

Runs are only written by ``WorkflowRunner`` and its background task;
this service serves the polling and listing endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from aioffice.models.run import WorkflowRun

if TYPE_CHECKING:
    import uuid

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from aioffice.models.enums import RunStatus


class RunService:
    """Service for querying WorkflowRun records."""

    @staticmethod
    async def get(
        db: AsyncSession,
        run_id: uuid.UUID,
    ) -> WorkflowRun | None:
        """Get a run by ID.

        Args:
            db: Database session.
            run_id: UUID of the run to retrieve.

        Returns:
            The WorkflowRun if found, None otherwise.
        """
        return await db.get(WorkflowRun, run_id)

    @staticmethod
    async def list(
        db: AsyncSession,
        workflow_id: uuid.UUID | None = None,
        office_id: uuid.UUID | None = None,
        status: RunStatus | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[WorkflowRun]:
        """List runs, newest first.

        Args:
            db: Database session.
            workflow_id: Optional workflow filter.
            office_id: Optional office filter.
            status: Optional status filter.
            skip: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            List of WorkflowRun records.
        """
        query = _apply_filters(select(WorkflowRun), workflow_id, office_id, status)
        query = query.order_by(WorkflowRun.created_at.desc())
        query = query.offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(
        db: AsyncSession,
        workflow_id: uuid.UUID | None = None,
        office_id: uuid.UUID | None = None,
        status: RunStatus | None = None,
    ) -> int:
        """Count runs matching the same filters as ``list``."""
        query = _apply_filters(
            select(func.count(WorkflowRun.id)), workflow_id, office_id, status
        )
        result = await db.execute(query)
        return result.scalar_one()


def _apply_filters(
    query: Select,
    workflow_id: uuid.UUID | None,
    office_id: uuid.UUID | None,
    status: RunStatus | None,
) -> Select:
    if workflow_id is not None:
        query = query.where(WorkflowRun.workflow_id == workflow_id)
    if office_id is not None:
        query = query.where(WorkflowRun.office_id == office_id)
    if status is not None:
        query = query.where(WorkflowRun.status == str(status))
    return query


__all__ = ["RunService"]
