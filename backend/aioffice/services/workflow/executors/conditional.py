"""Conditional node executor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.conditions import evaluate
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome
from aioffice.services.workflow.graph import FALSE_BRANCH, TRUE_BRANCH

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)


class ConditionalExecutor(NodeExecutor):
    """Evaluates the node's ``condition`` and selects a branch.

    Counts toward progress but records no result.
    """

    kinds = (NodeKind.CONDITIONAL.value,)
    records_result = False

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        condition = node.get("condition")
        outcome = evaluate(condition, context)
        branch = TRUE_BRANCH if outcome else FALSE_BRANCH
        logger.debug(
            f"Condition '{condition}' evaluated to {outcome}",
            extra={"context": {"run_id": str(context.run_id), "node_id": node.id, "branch": branch}},
        )
        return NodeOutcome.take(branch)
