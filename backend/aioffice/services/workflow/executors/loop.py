"""Loop node executor.

Iterates over a list variable, or a fixed number of times when no list is
configured, exposing the current index and item as ``_loopIndex`` and
``_loopItem``. Downstream nodes run once after the loop, not once per
iteration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from aioffice.core.config import settings
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome, utc_now_iso

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

LOOP_INDEX_VARIABLE = "_loopIndex"
LOOP_ITEM_VARIABLE = "_loopItem"


class LoopExecutor(NodeExecutor):
    """Executor for loop nodes."""

    kinds = (NodeKind.LOOP.value,)

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        items: list[Any] = []
        collection = node.get("collection")
        # Only a variable name selects a list; anything else falls back to a count
        if isinstance(collection, str) and collection in context.variables:
            value = context.variables[collection]
            if isinstance(value, list):
                items = value

        count = len(items) if items else self._iterations(node.get("iterations"))

        iterations: list[dict[str, Any]] = []
        for index in range(count):
            item = items[index] if index < len(items) else None
            iterations.append({"index": index, "item": item, "timestamp": utc_now_iso()})
            context.set_variable(LOOP_INDEX_VARIABLE, index)
            context.set_variable(LOOP_ITEM_VARIABLE, item)

        return NodeOutcome.of({"success": True, "iterations": count, "results": iterations})

    @staticmethod
    def _iterations(value: Any) -> int:
        if value is None:
            return settings.DEFAULT_LOOP_ITERATIONS
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0
