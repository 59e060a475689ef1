"""Base node executor interface.

Every node kind is handled by one ``NodeExecutor``. Executors report
expected failures inside their result value and do not raise; the
traversal engine treats an escaping exception as fatal for the run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node


@dataclass(frozen=True)
class NodeOutcome:
    """What executing a node produced.

    Attributes:
        result: Value stored in ``context.results`` for result-recording kinds.
        branch: Branch token selecting outgoing edges (conditional kinds).
    """

    result: Any = None
    branch: str | None = None

    @classmethod
    def empty(cls) -> NodeOutcome:
        """Outcome of a node that produces nothing."""
        return cls()

    @classmethod
    def of(cls, result: Any) -> NodeOutcome:
        """Outcome carrying a result value."""
        return cls(result=result)

    @classmethod
    def take(cls, branch: str) -> NodeOutcome:
        """Outcome selecting a branch."""
        return cls(branch=branch)


class NodeExecutor(ABC):
    """Abstract base class for node executors.

    Class attributes:
        kinds: Node kinds this executor is registered for by default.
        counts_toward_progress: Whether executing the node advances progress.
        records_result: Whether the outcome's result is stored per node.
    """

    kinds: ClassVar[tuple[str, ...]] = ()
    counts_toward_progress: ClassVar[bool] = True
    records_result: ClassVar[bool] = True

    @abstractmethod
    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        """Execute one node against the run context."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(kinds={list(self.kinds)})>"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a ``Z`` suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def failure(error: str, **extra: Any) -> dict[str, Any]:
    """Result payload for an executor-local failure."""
    return {"success": False, **extra, "error": error}


__all__ = [
    "NodeExecutor",
    "NodeOutcome",
    "failure",
    "utc_now_iso",
]
