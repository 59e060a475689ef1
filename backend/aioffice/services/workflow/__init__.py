"""Workflow execution package.

- graph: parse stored documents into a validated ``WorkflowGraph``
- conditions: evaluate conditional-node expressions
- executors: one executor per node kind, looked up by registry
- executor: breadth-first traversal engine
- runner: run lifecycle (create row, schedule, record progress)
"""

from aioffice.services.workflow.context import ExecutionContext
from aioffice.services.workflow.exceptions import (
    EmptyGraphError,
    GraphValidationError,
    InvalidEdgeError,
    InvalidEdgeReferenceError,
    InvalidNodeError,
    MissingStartNodeError,
)
from aioffice.services.workflow.executor import (
    ExecutionResult,
    NullObserver,
    TraversalObserver,
    WorkflowExecutor,
    compute_progress,
)
from aioffice.services.workflow.graph import Edge, Node, WorkflowGraph
from aioffice.services.workflow.runner import (
    RunHandle,
    RunRecorder,
    TaskScheduler,
    WorkflowRunner,
    get_runner,
    reset_runner,
)

__all__ = [
    "Edge",
    "EmptyGraphError",
    "ExecutionContext",
    "ExecutionResult",
    "GraphValidationError",
    "InvalidEdgeError",
    "InvalidEdgeReferenceError",
    "InvalidNodeError",
    "MissingStartNodeError",
    "Node",
    "NullObserver",
    "RunHandle",
    "RunRecorder",
    "TaskScheduler",
    "TraversalObserver",
    "WorkflowExecutor",
    "WorkflowGraph",
    "WorkflowRunner",
    "compute_progress",
    "get_runner",
    "reset_runner",
]
