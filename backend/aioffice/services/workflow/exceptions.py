"""Graph validation exceptions.

Raised while turning a stored document into a ``WorkflowGraph``. The
runner catches them in the background task and fails the run.
"""

from typing import Any

# ============================================================================
# Graph Validation Exceptions
# ============================================================================


class GraphValidationError(Exception):
    """Raised when a workflow document cannot be turned into a graph.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class EmptyGraphError(GraphValidationError):
    """Raised when the document contains no nodes."""

    def __init__(self) -> None:
        super().__init__(
            message="Workflow has no nodes",
            error_code="EMPTY_GRAPH",
        )


class MissingStartNodeError(GraphValidationError):
    """Raised when no node of kind ``start`` exists."""

    def __init__(self) -> None:
        super().__init__(
            message="No start node found in workflow",
            error_code="NO_START_NODE",
        )


class InvalidNodeError(GraphValidationError):
    """Raised when a node entry is malformed.

    Attributes:
        index: Position of the node in the document.
    """

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(
            message=f"Invalid node at position {index}: {reason}",
            error_code="INVALID_NODE",
            details={"index": index, "reason": reason},
        )
        self.index = index


class InvalidEdgeError(GraphValidationError):
    """Raised when an edge entry is not an object.

    Attributes:
        index: Position of the edge in the document.
    """

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(
            message=f"Invalid edge at position {index}: {reason}",
            error_code="INVALID_EDGE",
            details={"index": index, "reason": reason},
        )
        self.index = index


class InvalidEdgeReferenceError(GraphValidationError):
    """Raised when an edge points at a node id that does not exist.

    Attributes:
        edge_id: Offending edge id.
        missing_nodes: Node ids referenced by the edge but not defined.
    """

    def __init__(self, edge_id: str, missing_nodes: list[str]) -> None:
        super().__init__(
            message=f"Edge {edge_id} references unknown nodes: {', '.join(missing_nodes)}",
            error_code="INVALID_EDGE_REFERENCE",
            details={"edge_id": edge_id, "missing_nodes": missing_nodes},
        )
        self.edge_id = edge_id
        self.missing_nodes = missing_nodes


__all__ = [
    "EmptyGraphError",
    "GraphValidationError",
    "InvalidEdgeError",
    "InvalidEdgeReferenceError",
    "InvalidNodeError",
    "MissingStartNodeError",
]
