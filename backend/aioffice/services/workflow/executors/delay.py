"""Delay node executor."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from aioffice.core.config import settings
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome, utc_now_iso

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node


def _seconds(value: Any, default: float) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return float(default)
    # Zero, negative and NaN fall back to the default
    return seconds if seconds > 0 else float(default)


class DelayExecutor(NodeExecutor):
    """Suspends the run for ``delay`` seconds."""

    kinds = (NodeKind.DELAY.value,)

    def __init__(self, default_seconds: float | None = None) -> None:
        self.default_seconds = (
            default_seconds if default_seconds is not None else settings.DEFAULT_DELAY_SECONDS
        )

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:  # noqa: ARG002
        seconds = _seconds(node.get("delay"), self.default_seconds)
        await asyncio.sleep(seconds)
        return NodeOutcome.of(
            {
                "success": True,
                "delayedFor": int(seconds) if seconds.is_integer() else seconds,
                "completedAt": utc_now_iso(),
            }
        )
