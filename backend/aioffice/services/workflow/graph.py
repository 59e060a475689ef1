"""Typed workflow graph built from the editor document.

The editor stores nodes as ``{id, type, position, data}`` and edges as
``{id, source, target, sourceHandle}``. ``WorkflowGraph.from_document``
validates that shape once per run and exposes read-only lookups for the
traversal engine.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from aioffice.models.enums import NodeKind
from aioffice.services.workflow.exceptions import (
    EmptyGraphError,
    InvalidEdgeError,
    InvalidEdgeReferenceError,
    InvalidNodeError,
    MissingStartNodeError,
)

# Source handles on a conditional node's outgoing edges
TRUE_BRANCH = "a"
FALSE_BRANCH = "b"

# Kinds that never count toward progress and never record a result
STRUCTURAL_KINDS = frozenset({NodeKind.START.value, NodeKind.END.value})


@dataclass(frozen=True)
class Node:
    """One step of a workflow.

    Attributes:
        id: Identifier, unique within the graph.
        kind: Node kind (``start``, ``task``, ``conditional``, ...).
        attributes: Kind-specific settings from the editor's ``data`` object.
        position: Canvas position, ignored by the engine.
    """

    id: str
    kind: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    position: Mapping[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Display label, falling back to the node id."""
        label = self.attributes.get("label")
        return str(label) if label else self.id

    @property
    def is_structural(self) -> bool:
        """True for start and end markers."""
        return self.kind in STRUCTURAL_KINDS

    def get(self, key: str, default: Any = None) -> Any:
        """Read an attribute."""
        return self.attributes.get(key, default)


@dataclass(frozen=True)
class Edge:
    """Directed connection between two nodes.

    Attributes:
        id: Edge identifier.
        source: Source node id.
        target: Target node id.
        source_handle: Branch selector on the source node, if any.
    """

    id: str
    source: str
    target: str
    source_handle: str | None = None


class WorkflowGraph:
    """Validated, immutable graph for a single run.

    Example:
        >>> graph = WorkflowGraph.from_document(workflow.nodes, workflow.edges)
        >>> graph.start_node.id
        'start-1'
        >>> [e.target for e in graph.outgoing("start-1")]
        ['task-1']
    """

    __slots__ = ("_edges", "_nodes", "_outgoing", "_start_id")

    def __init__(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        """Build the graph and validate references.

        Raises:
            EmptyGraphError: If there are no nodes.
            MissingStartNodeError: If there is no start node.
            InvalidEdgeReferenceError: If an edge references an unknown node.
        """
        ordered = list(nodes)
        if not ordered:
            raise EmptyGraphError()

        self._nodes: dict[str, Node] = {}
        for node in ordered:
            # First definition wins for duplicate ids
            self._nodes.setdefault(node.id, node)

        start = next((n for n in ordered if n.kind == NodeKind.START.value), None)
        if start is None:
            raise MissingStartNodeError()
        self._start_id = start.id

        self._edges: tuple[Edge, ...] = tuple(edges)
        outgoing: defaultdict[str, list[Edge]] = defaultdict(list)
        for edge in self._edges:
            missing = [nid for nid in (edge.source, edge.target) if nid not in self._nodes]
            if missing:
                raise InvalidEdgeReferenceError(edge.id, missing)
            outgoing[edge.source].append(edge)
        self._outgoing = {source: tuple(out) for source, out in outgoing.items()}

    @classmethod
    def from_document(
        cls,
        nodes: Iterable[Mapping[str, Any]] | None,
        edges: Iterable[Mapping[str, Any]] | None,
    ) -> WorkflowGraph:
        """Parse the stored editor document.

        Both editor spelling (``type``/``data``/``sourceHandle``) and
        engine spelling (``kind``/``attributes``/``source_handle``) are
        accepted.

        Raises:
            GraphValidationError: If the document is not a runnable graph.
        """
        parsed_nodes = [_parse_node(index, raw) for index, raw in enumerate(nodes or [])]
        parsed_edges = [_parse_edge(index, raw) for index, raw in enumerate(edges or [])]
        return cls(parsed_nodes, parsed_edges)

    @property
    def start_node(self) -> Node:
        """The entry point of the traversal."""
        return self._nodes[self._start_id]

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only mapping of node id to node."""
        return MappingProxyType(self._nodes)

    @property
    def edges(self) -> tuple[Edge, ...]:
        """All edges in document order."""
        return self._edges

    @property
    def executable_count(self) -> int:
        """Number of nodes that are neither start nor end."""
        return sum(1 for node in self._nodes.values() if not node.is_structural)

    def get_node(self, node_id: str) -> Node | None:
        """Look up a node by id."""
        return self._nodes.get(node_id)

    def outgoing(self, node_id: str) -> tuple[Edge, ...]:
        """Outgoing edges of a node in document order."""
        return self._outgoing.get(node_id, ())

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"<WorkflowGraph(nodes={len(self._nodes)}, edges={len(self._edges)})>"


def _parse_node(index: int, raw: Mapping[str, Any]) -> Node:
    if not isinstance(raw, Mapping):
        raise InvalidNodeError(index, "node must be an object")
    node_id = raw.get("id")
    if node_id in (None, ""):
        raise InvalidNodeError(index, "missing id")
    kind = raw.get("type", raw.get("kind"))
    if not kind:
        raise InvalidNodeError(index, "missing type")
    attributes = raw.get("data", raw.get("attributes")) or {}
    if not isinstance(attributes, Mapping):
        raise InvalidNodeError(index, "data must be an object")
    # Layout only; ignored unless it is an object
    position = raw.get("position")
    return Node(
        id=str(node_id),
        kind=str(kind),
        attributes=MappingProxyType(dict(attributes)),
        position=MappingProxyType(dict(position) if isinstance(position, Mapping) else {}),
    )


def _parse_edge(index: int, raw: Mapping[str, Any]) -> Edge:
    if not isinstance(raw, Mapping):
        raise InvalidEdgeError(index, "edge must be an object")
    source = raw.get("source", raw.get("sourceNodeId"))
    target = raw.get("target", raw.get("targetNodeId"))
    handle = raw.get("sourceHandle", raw.get("source_handle"))
    return Edge(
        id=str(raw.get("id") or f"edge-{index}"),
        source=str(source),
        target=str(target),
        source_handle=str(handle) if handle is not None else None,
    )


__all__ = [
    "FALSE_BRANCH",
    "STRUCTURAL_KINDS",
    "TRUE_BRANCH",
    "Edge",
    "Node",
    "WorkflowGraph",
]
