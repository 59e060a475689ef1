"""Run lifecycle management.

``WorkflowRunner.start`` validates a run request, writes the run row and
hands the traversal to a background asyncio task, returning before any
node executes. The background task owns the run row from then on: a
``RunRecorder`` writes the current node and progress as the traversal
reports them, then the terminal status.

Store writes made by the background task use their own sessions and are
never allowed to fail the traversal. A failed write is logged; if the
terminal write fails the row stays ``running``.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from aioffice.core.exceptions import (
    EmptyWorkflowError,
    InvalidRunRequestError,
    RunCreationError,
    WorkflowNotFoundError,
)
from aioffice.core.logging import get_logger
from aioffice.db.session import async_session
from aioffice.models.enums import RunStatus
from aioffice.models.run import WorkflowRun
from aioffice.models.workflow import Workflow
from aioffice.services.workflow.context import ExecutionContext
from aioffice.services.workflow.exceptions import GraphValidationError
from aioffice.services.workflow.executor import ExecutionResult, WorkflowExecutor
from aioffice.services.workflow.graph import WorkflowGraph

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from aioffice.services.workflow.executors.registry import ExecutorRegistry

logger = get_logger(__name__)


# =============================================================================
# Background task scheduling
# =============================================================================


class TaskScheduler:
    """Keeps strong references to background run tasks.

    The event loop only holds weak references to tasks, so an unreferenced
    run could be garbage collected mid-flight. Finished tasks remove
    themselves from the set.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def schedule(
        self,
        coro: Coroutine[Any, Any, Any],
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        """Start a coroutine as a task on the running loop."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def active(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every scheduled task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


# =============================================================================
# Persistence observer
# =============================================================================


class RunRecorder:
    """Traversal observer that writes run state to the database.

    Each event opens a short-lived session so that progress becomes
    visible to pollers as soon as it is committed.

    Attributes:
        run_id: Run row updated by this recorder.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        run_id: uuid.UUID,
    ) -> None:
        self._session_factory = session_factory
        self.run_id = run_id

    async def node_started(self, node_id: str) -> None:
        await self._write("node_started", lambda run: run.mark_node(node_id))

    async def progress(self, percent: int) -> None:
        await self._write("progress", lambda run: run.advance(percent))

    async def finish(self, result: ExecutionResult) -> None:
        """Persist the terminal state of the run."""
        if result.status == RunStatus.COMPLETED:
            await self._write("run_completed", lambda run: run.complete(result.output))
        else:
            await self._write(
                "run_failed",
                lambda run: run.fail(result.error or "Unknown error"),
            )

    async def _write(self, action: str, mutate: Callable[[WorkflowRun], None]) -> None:
        try:
            async with self._session_factory() as session:
                run = await session.get(WorkflowRun, self.run_id)
                if run is None:
                    logger.error(
                        "Run row disappeared during execution",
                        extra={"context": {"run_id": str(self.run_id), "action": action}},
                    )
                    return
                mutate(run)
                await session.commit()
        except (SQLAlchemyError, ValueError) as e:
            logger.error(
                f"Failed to record run state: {e}",
                exc_info=True,
                extra={"context": {"run_id": str(self.run_id), "action": action}},
            )


# =============================================================================
# Runner
# =============================================================================


@dataclass(frozen=True)
class RunHandle:
    """Identifies a run that has been accepted and scheduled."""

    run_id: uuid.UUID
    workflow_id: uuid.UUID
    task: asyncio.Task[Any] | None = None


class WorkflowRunner:
    """Starts workflow runs and executes them in the background.

    Attributes:
        session_factory: Session factory used by background writes.
        executor: Traversal engine.
        scheduler: Holder of background tasks.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        registry: ExecutorRegistry | None = None,
        scheduler: TaskScheduler | None = None,
    ) -> None:
        self.session_factory = session_factory or async_session
        self.executor = WorkflowExecutor(registry)
        self.scheduler = scheduler or TaskScheduler()

    async def start(
        self,
        db: AsyncSession,
        workflow_id: Any,
        office_id: Any,
        input_data: dict[str, Any] | None = None,
    ) -> RunHandle:
        """Create a run and schedule its execution.

        Args:
            db: Request session used to load the workflow and insert the run.
            workflow_id: Workflow to execute.
            office_id: Tenant scope recorded on the run.
            input_data: Initial run variables.

        Returns:
            Handle of the scheduled run.

        Raises:
            InvalidRunRequestError: If an identifier is missing or malformed.
            WorkflowNotFoundError: If the workflow does not exist.
            EmptyWorkflowError: If the workflow has no nodes.
            RunCreationError: If the run row could not be written.
        """
        if not workflow_id or not office_id:
            raise InvalidRunRequestError("workflowId and officeId are required")

        office_uuid = _as_uuid(office_id)
        if office_uuid is None:
            raise InvalidRunRequestError(
                "officeId must be a UUID",
                details={"office_id": str(office_id)},
            )
        workflow_uuid = _as_uuid(workflow_id)
        if workflow_uuid is None:
            raise WorkflowNotFoundError(workflow_id)

        workflow = await db.get(Workflow, workflow_uuid)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        if not workflow.has_nodes:
            raise EmptyWorkflowError(workflow_id)

        # Detach the document so the background task never touches the request session
        nodes = list(workflow.nodes or [])
        edges = list(workflow.edges or [])

        try:
            run = WorkflowRun(
                workflow_id=workflow_uuid,
                office_id=office_uuid,
                status=RunStatus.PENDING,
            )
            run.start()
            db.add(run)
            await db.flush()
            run_id = run.id
            # Committed before scheduling so the background task can load the row
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"Failed to create run: {e}",
                exc_info=True,
                extra={"context": {"workflow_id": str(workflow_uuid)}},
            )
            raise RunCreationError(str(e)) from e

        logger.info(
            "Workflow run accepted",
            extra={
                "context": {
                    "run_id": str(run_id),
                    "workflow_id": str(workflow_uuid),
                    "office_id": str(office_uuid),
                    "action": "run_started",
                }
            },
        )

        context = ExecutionContext(
            run_id=run_id,
            workflow_id=workflow_uuid,
            office_id=office_uuid,
            variables=input_data,
        )
        task = self.scheduler.schedule(
            self._execute(context, nodes, edges),
            name=f"workflow-run-{run_id}",
        )
        return RunHandle(run_id=run_id, workflow_id=workflow_uuid, task=task)

    async def _execute(
        self,
        context: ExecutionContext,
        nodes: list[dict[str, Any]],
        edges: list[dict[str, Any]],
    ) -> ExecutionResult:
        recorder = RunRecorder(self.session_factory, context.run_id)

        # Anything escaping here would leave the row running
        try:
            result = await self._traverse(context, nodes, edges, recorder)
        except Exception as e:
            logger.error(
                f"Workflow run crashed: {type(e).__name__}: {e}",
                exc_info=True,
                extra={"context": {"run_id": str(context.run_id)}},
            )
            result = ExecutionResult(status=RunStatus.FAILED, error=str(e) or type(e).__name__)

        await recorder.finish(result)

        logger.info(
            f"Workflow run {result.status.value}",
            extra={
                "context": {
                    "run_id": str(context.run_id),
                    "workflow_id": str(context.workflow_id),
                    "status": result.status.value,
                    "nodes_visited": len(result.visited),
                    "action": f"run_{result.status.value}",
                }
            },
        )
        return result

    async def _traverse(
        self,
        context: ExecutionContext,
        nodes: list[dict[str, Any]],
        edges: list[dict[str, Any]],
        recorder: RunRecorder,
    ) -> ExecutionResult:
        try:
            graph = WorkflowGraph.from_document(nodes, edges)
        except GraphValidationError as e:
            logger.warning(
                f"Workflow graph rejected: {e.message}",
                extra={
                    "context": {
                        "run_id": str(context.run_id),
                        "error_code": e.error_code,
                        **e.details,
                    }
                },
            )
            return ExecutionResult(status=RunStatus.FAILED, error=e.message)
        return await self.executor.execute(graph, context, recorder)

    async def shutdown(self) -> None:
        """Wait for in-flight runs and release executor clients."""
        await self.scheduler.drain()
        await self.executor.registry.aclose()


def _as_uuid(value: Any) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


# Module-level singleton for convenience
_runner: WorkflowRunner | None = None


def get_runner() -> WorkflowRunner:
    """Get the global workflow runner."""
    global _runner
    if _runner is None:
        _runner = WorkflowRunner()
    return _runner


def reset_runner() -> None:
    """Drop the global runner so the next call rebuilds it."""
    global _runner
    _runner = None


__all__ = [
    "RunHandle",
    "RunRecorder",
    "TaskScheduler",
    "WorkflowRunner",
    "get_runner",
    "reset_runner",
]
