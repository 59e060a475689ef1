"""Workflow run model.

A run is the durable, queryable record of one execution of a workflow.
Clients poll it while the engine updates it in place from a background
task.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aioffice.models.base import (
    GUID,
    Base,
    JSONType,
    TimestampMixin,
    UUIDMixin,
    utc_now,
)
from aioffice.models.enums import RunStatus


class WorkflowRun(UUIDMixin, TimestampMixin, Base):
    """WorkflowRun model for tracking a single workflow execution.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        workflow_id: UUID of the executed workflow
        office_id: Tenant scope of the run
        status: Current run status
        progress: Integer percentage (0-100), never decreasing while running
        current_node_id: Graph node the engine is currently executing
        started_at: When the run was created
        completed_at: When the run reached a terminal state
        error: Failure message (failed runs only)
        result: Map of node id to node output (completed runs only)
        created_at: Timestamp of creation (from TimestampMixin)
        updated_at: Timestamp of last update (from TimestampMixin)
    """

    __tablename__ = "workflow_runs"

    __table_args__ = (
        CheckConstraint(
            "progress >= 0 AND progress <= 100",
            name="ck_workflow_runs_progress_range",
        ),
        Index("idx_workflow_runs_office_status", "office_id", "status"),
    )

    workflow_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("workflows.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    office_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        nullable=False,
        index=True,
    )

    status: Mapped[RunStatus] = mapped_column(
        String(50),
        nullable=False,
        default=RunStatus.PENDING,
        server_default="pending",
    )

    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    # Node ids come from the editor document and are not UUIDs
    current_node_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    error: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    result: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
    )

    @property
    def duration_seconds(self) -> float | None:
        """Run duration in seconds, None until the run has finished."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def is_terminal(self) -> bool:
        """Check if the run is in a terminal state."""
        return self.status in (RunStatus.COMPLETED, RunStatus.FAILED)

    def start(self) -> None:
        """Mark the run as running.

        Sets status to RUNNING, resets progress and records started_at.

        Raises:
            ValueError: If the run is not in PENDING state.
        """
        if self.status != RunStatus.PENDING:
            raise ValueError(f"Cannot start run in {self.status} state")
        self.status = RunStatus.RUNNING
        self.progress = 0
        self.started_at = utc_now()

    def mark_node(self, node_id: str) -> None:
        """Record the node the engine is about to execute.

        Raises:
            ValueError: If the run is not RUNNING.
        """
        if self.status != RunStatus.RUNNING:
            raise ValueError(f"Cannot update node of run in {self.status} state")
        self.current_node_id = node_id

    def advance(self, progress: int) -> None:
        """Raise the progress percentage.

        Lower values than the stored one are ignored so progress never
        moves backwards.

        Args:
            progress: New percentage between 0 and 100.

        Raises:
            ValueError: If the run is not RUNNING or progress is out of range.
        """
        if self.status != RunStatus.RUNNING:
            raise ValueError(f"Cannot update progress of run in {self.status} state")
        if not 0 <= progress <= 100:
            raise ValueError(f"Progress must be between 0 and 100, got {progress}")
        self.progress = max(self.progress or 0, progress)

    def complete(self, result: dict[str, Any] | None = None) -> None:
        """Mark the run as completed with progress 100.

        Args:
            result: Accumulated node results.

        Raises:
            ValueError: If the run is not RUNNING.
        """
        if self.status != RunStatus.RUNNING:
            raise ValueError(f"Cannot complete run in {self.status} state")
        self.status = RunStatus.COMPLETED
        self.progress = 100
        self.completed_at = utc_now()
        self.result = result if result is not None else {}

    def fail(self, error: str) -> None:
        """Mark the run as failed.

        Progress and result are left untouched.

        Args:
            error: Description of what caused the failure.

        Raises:
            ValueError: If the run is not RUNNING.
        """
        if self.status != RunStatus.RUNNING:
            raise ValueError(f"Cannot fail run in {self.status} state")
        self.status = RunStatus.FAILED
        self.completed_at = utc_now()
        self.error = error

    def __repr__(self) -> str:
        """Return string representation of the run."""
        return (
            f"<WorkflowRun(id={self.id}, "
            f"workflow_id={self.workflow_id}, "
            f"status={self.status}, progress={self.progress})>"
        )
