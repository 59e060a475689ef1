"""ExecutionContext for a single workflow run.

The context is owned by exactly one run and is never shared, so plain
dictionaries are enough; no locking is needed.
"""

from __future__ import annotations

from typing import Any


class ExecutionContext:
    """Mutable variable and result state threaded through one run.

    Attributes:
        run_id: Identifier of the run this context belongs to.
        workflow_id: Identifier of the executed workflow.
        office_id: Tenant scope of the run.
        variables: Caller input plus values written back by executors.
        results: Node id to executor output, append-only.
    """

    def __init__(
        self,
        run_id: Any = None,
        workflow_id: Any = None,
        office_id: Any = None,
        variables: dict[str, Any] | None = None,
    ) -> None:
        self.run_id = run_id
        self.workflow_id = workflow_id
        self.office_id = office_id
        self.variables: dict[str, Any] = dict(variables or {})
        self.results: dict[str, Any] = {}

    def get_variable(self, name: str, default: Any = None) -> Any:
        """Get a variable value."""
        return self.variables.get(name, default)

    def set_variable(self, name: str, value: Any) -> None:
        """Add or overwrite a variable."""
        self.variables[name] = value

    def record_result(self, node_id: str, value: Any) -> None:
        """Store a node's output.

        Raises:
            ValueError: If a result for the node was already recorded.
        """
        if node_id in self.results:
            raise ValueError(f"Result for node {node_id} already recorded")
        self.results[node_id] = value

    def envelope(self, node_id: str) -> dict[str, Any]:
        """Build the JSON payload outbound nodes send about this run."""
        return {
            "workflowId": str(self.workflow_id) if self.workflow_id is not None else None,
            "runId": str(self.run_id) if self.run_id is not None else None,
            "nodeId": node_id,
            "variables": self.variables,
            "results": self.results,
        }

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of the results for persistence."""
        return dict(self.results)

    def __repr__(self) -> str:
        return (
            f"<ExecutionContext(run_id={self.run_id}, "
            f"variables={len(self.variables)}, results={len(self.results)})>"
        )


__all__ = ["ExecutionContext"]
