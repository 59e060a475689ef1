"""Executors for nodes that do no work."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)


class StructuralExecutor(NodeExecutor):
    """Start and end markers."""

    kinds = (NodeKind.START.value, NodeKind.END.value)
    counts_toward_progress = False
    records_result = False

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:  # noqa: ARG002
        return NodeOutcome.empty()


class UnknownKindExecutor(NodeExecutor):
    """Fallback for kinds without a registered executor.

    The node is visited and counted, records nothing, and traversal
    continues through all of its outgoing edges.
    """

    records_result = False

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        logger.warning(
            f"No executor registered for node kind '{node.kind}', skipping",
            extra={"context": {"run_id": str(context.run_id), "node_id": node.id, "kind": node.kind}},
        )
        return NodeOutcome.empty()
