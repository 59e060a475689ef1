"""Breadth-first traversal engine.

``WorkflowExecutor`` walks a ``WorkflowGraph`` from its start node with a
FIFO worklist and a visited set, runs each node's executor, and follows
outgoing edges. Conditional nodes only follow edges whose source handle
matches the selected branch. Nodes reachable through several paths run
once, on the first path that reaches them.

The engine knows nothing about persistence. It reports node starts and
progress to a ``TraversalObserver``; the run lifecycle layer provides an
observer that writes those events to the database.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from aioffice.core.logging import get_logger
from aioffice.models.enums import RunStatus
from aioffice.services.workflow.executors.registry import ExecutorRegistry, get_registry

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Edge, WorkflowGraph

logger = get_logger(__name__)

# Progress reported while running; 100 is reserved for completion
MAX_RUNNING_PROGRESS = 99
# Progress reported when a graph has only start and end nodes
NO_WORK_PROGRESS = 50


class TraversalObserver(Protocol):
    """Receives traversal events in order."""

    async def node_started(self, node_id: str) -> None: ...

    async def progress(self, percent: int) -> None: ...


class NullObserver:
    """Observer that ignores every event."""

    async def node_started(self, node_id: str) -> None:  # noqa: ARG002
        return None

    async def progress(self, percent: int) -> None:  # noqa: ARG002
        return None


@dataclass
class ExecutionResult:
    """Result of one traversal.

    Attributes:
        status: COMPLETED or FAILED.
        output: Node results when completed, None when failed.
        error: Failure message when failed.
        visited: Node ids in execution order.
        processed: Number of nodes counted toward progress.
    """

    status: RunStatus
    output: dict[str, Any] | None = None
    error: str | None = None
    visited: list[str] = field(default_factory=list)
    processed: int = 0

    @property
    def succeeded(self) -> bool:
        """True when the traversal completed."""
        return self.status == RunStatus.COMPLETED


def compute_progress(processed: int, total: int) -> int:
    """Percentage of executable nodes processed, capped below 100.

    Rounds half up. Returns ``NO_WORK_PROGRESS`` when there is nothing to
    execute.
    """
    if total <= 0:
        return NO_WORK_PROGRESS
    percent = math.floor(processed / total * 100 + 0.5)
    return min(percent, MAX_RUNNING_PROGRESS)


class WorkflowExecutor:
    """Walks a workflow graph and runs node executors.

    Attributes:
        registry: Executor lookup by node kind.
    """

    def __init__(self, registry: ExecutorRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    async def execute(
        self,
        graph: WorkflowGraph,
        context: ExecutionContext,
        observer: TraversalObserver | None = None,
    ) -> ExecutionResult:
        """Traverse the graph to completion.

        Never raises for node or traversal failures; they are reported as
        a FAILED result. Task cancellation propagates.

        Args:
            graph: Validated workflow graph.
            context: Run context; ``results`` is filled in place.
            observer: Receives node-start and progress events.

        Returns:
            ExecutionResult with status COMPLETED and the accumulated
            results, or FAILED and the error message.
        """
        observer = observer or NullObserver()
        visited: list[str] = []
        processed = 0

        try:
            processed = await self._walk(graph, context, observer, visited)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(
                f"Workflow traversal failed: {message}",
                exc_info=True,
                extra={
                    "context": {
                        "run_id": str(context.run_id),
                        "workflow_id": str(context.workflow_id),
                        "visited": len(visited),
                    }
                },
            )
            return ExecutionResult(
                status=RunStatus.FAILED,
                error=message,
                visited=visited,
                processed=processed,
            )

        return ExecutionResult(
            status=RunStatus.COMPLETED,
            output=context.snapshot(),
            visited=visited,
            processed=processed,
        )

    async def _walk(
        self,
        graph: WorkflowGraph,
        context: ExecutionContext,
        observer: TraversalObserver,
        visited_order: list[str],
    ) -> int:
        total = graph.executable_count
        processed = 0
        visited: set[str] = set()
        worklist: deque[str] = deque([graph.start_node.id])

        while worklist:
            node_id = worklist.popleft()
            if node_id in visited:
                continue
            visited.add(node_id)

            node = graph.get_node(node_id)
            if node is None:
                continue
            visited_order.append(node_id)

            await observer.node_started(node_id)

            executor = self.registry.get(node.kind)
            outcome = await executor.execute(node, context)

            if executor.records_result:
                context.record_result(node.id, outcome.result)
            if executor.counts_toward_progress and not node.is_structural:
                processed += 1

            await observer.progress(compute_progress(processed, total))

            for edge in self._next_edges(graph.outgoing(node_id), outcome.branch):
                worklist.append(edge.target)

        return processed

    @staticmethod
    def _next_edges(edges: tuple[Edge, ...], branch: str | None) -> list[Edge]:
        """Edges to follow; only the selected branch when a branch was chosen."""
        if branch is None:
            return list(edges)
        return [edge for edge in edges if edge.source_handle == branch]


__all__ = [
    "MAX_RUNNING_PROGRESS",
    "NO_WORK_PROGRESS",
    "ExecutionResult",
    "NullObserver",
    "TraversalObserver",
    "WorkflowExecutor",
    "compute_progress",
]
