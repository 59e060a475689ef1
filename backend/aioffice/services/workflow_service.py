"""Workflow document persistence.

Documents are stored as submitted. They are only checked as graphs when a
run starts, so an editor can save a half-built workflow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Select, func, select

from aioffice.models.workflow import Workflow

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from aioffice.schemas.workflow import WorkflowCreate


class WorkflowService:
    """Create, fetch and page through workflow documents."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, data: WorkflowCreate) -> Workflow:
        """Persist a new document at version 1.

        Node and edge entries are copied into plain dicts so the stored
        JSON does not alias the request payload.
        """
        workflow = Workflow(
            office_id=data.office_id,
            name=data.name,
            description=data.description,
            nodes=[dict(node) for node in data.nodes],
            edges=[dict(edge) for edge in data.edges],
            is_active=data.is_active,
        )
        self.db.add(workflow)
        await self.db.flush()
        await self.db.refresh(workflow)
        return workflow

    async def get(self, workflow_id: UUID) -> Workflow | None:
        return await self.db.get(Workflow, workflow_id)

    async def list(
        self,
        office_id: UUID | None = None,
        skip: int = 0,
        limit: int = 20,
        is_active: bool | None = None,
    ) -> list[Workflow]:
        """One page of documents, most recently created first."""
        query = (
            _filtered(select(Workflow), office_id, is_active)
            .order_by(Workflow.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        rows = await self.db.scalars(query)
        return list(rows)

    async def count(
        self,
        office_id: UUID | None = None,
        is_active: bool | None = None,
    ) -> int:
        total = await self.db.scalar(
            _filtered(select(func.count(Workflow.id)), office_id, is_active)
        )
        return total or 0


def _filtered(
    query: Select,
    office_id: UUID | None,
    is_active: bool | None,
) -> Select:
    if office_id is not None:
        query = query.where(Workflow.office_id == office_id)
    if is_active is not None:
        query = query.where(Workflow.is_active == is_active)
    return query


__all__ = ["WorkflowService"]
