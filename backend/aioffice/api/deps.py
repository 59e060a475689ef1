"""Shared route dependencies.

Routes declare what they need with the annotated aliases below:

    @router.get("/runs")
    async def list_runs(db: DBSession, pagination: Pagination): ...
"""

from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from aioffice.db.session import get_db
from aioffice.services.workflow.runner import WorkflowRunner, get_runner

MAX_PAGE_SIZE = 100

# =============================================================================
# Database
# =============================================================================

DBSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# Pagination
# =============================================================================


class PaginationParams(BaseModel):
    """Offset pagination taken from ``skip`` and ``limit``."""

    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)

    @property
    def page(self) -> int:
        """1-indexed page the offset falls on."""
        return self.skip // self.limit + 1


def get_pagination_params(
    skip: Annotated[int, Query(ge=0, description="Records to skip")] = 0,
    limit: Annotated[
        int,
        Query(ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    ] = 20,
) -> PaginationParams:
    return PaginationParams(skip=skip, limit=limit)


Pagination = Annotated[PaginationParams, Depends(get_pagination_params)]


# =============================================================================
# Workflow runner
# =============================================================================

# Process-wide runner; tests override get_runner to use their own database
Runner = Annotated[WorkflowRunner, Depends(get_runner)]


__all__ = [
    "DBSession",
    "Pagination",
    "PaginationParams",
    "Runner",
    "get_db",
    "get_pagination_params",
    "get_runner",
]
