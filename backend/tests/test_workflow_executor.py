"""Tests for the breadth-first traversal engine."""

from uuid import uuid4

import pytest

from aioffice.models.enums import RunStatus
from aioffice.services.workflow import (
    ExecutionContext,
    WorkflowExecutor,
    WorkflowGraph,
)
from aioffice.services.workflow.executor import compute_progress
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome


class RecordingObserver:
    """Collects traversal events in order."""

    def __init__(self):
        self.events = []

    async def node_started(self, node_id):
        self.events.append(("node", node_id))

    async def progress(self, percent):
        self.events.append(("progress", percent))

    @property
    def nodes(self):
        return [value for event, value in self.events if event == "node"]

    @property
    def percents(self):
        return [value for event, value in self.events if event == "progress"]


class ExplodingExecutor(NodeExecutor):
    kinds = ("explode",)

    async def execute(self, node, context):
        raise RuntimeError(f"{node.id} exploded")


@pytest.fixture
def context():
    return ExecutionContext(run_id=uuid4(), workflow_id=uuid4(), office_id=uuid4())


@pytest.fixture
def executor(registry):
    return WorkflowExecutor(registry)


class TestComputeProgress:
    """Test progress percentage calculation."""

    @pytest.mark.parametrize(
        ("processed", "total", "expected"),
        [
            (0, 4, 0),
            (1, 4, 25),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
            (4, 4, 99),
            (0, 0, 50),
        ],
    )
    def test_values(self, processed, total, expected):
        assert compute_progress(processed, total) == expected


class TestWorkflowExecutor:
    """Test traversal order, branching, progress and failure."""

    @pytest.mark.asyncio
    async def test_linear_run(self, executor, context, linear_document):
        graph = WorkflowGraph.from_document(**linear_document)
        observer = RecordingObserver()

        result = await executor.execute(graph, context, observer)

        assert result.status == RunStatus.COMPLETED
        assert result.succeeded is True
        assert result.visited == ["start", "task-1", "end"]
        assert result.output == {
            "task-1": {"success": True, "output": 'Task "Draft summary" completed'}
        }
        assert observer.nodes == ["start", "task-1", "end"]
        assert observer.percents == [0, 99, 99]

    @pytest.mark.asyncio
    async def test_node_started_precedes_progress(self, executor, context, linear_document):
        graph = WorkflowGraph.from_document(**linear_document)
        observer = RecordingObserver()

        await executor.execute(graph, context, observer)

        assert observer.events[:2] == [("node", "start"), ("progress", 0)]

    @pytest.mark.asyncio
    async def test_diamond_runs_join_once(self, executor, context, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [
                make_node("start", "start"),
                make_node("a", "task", label="A"),
                make_node("b", "task", label="B"),
                make_node("c", "task", label="C"),
            ],
            [
                make_edge("start", "a"),
                make_edge("start", "b"),
                make_edge("a", "c"),
                make_edge("b", "c"),
            ],
        )

        result = await executor.execute(graph, context)

        assert result.visited == ["start", "a", "b", "c"]
        assert set(result.output) == {"a", "b", "c"}
        assert result.processed == 3

    @pytest.mark.asyncio
    async def test_cycle_terminates(self, executor, context, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [make_node("start", "start"), make_node("a", "task"), make_node("b", "task")],
            [make_edge("start", "a"), make_edge("a", "b"), make_edge("b", "a")],
        )

        result = await executor.execute(graph, context)

        assert result.visited == ["start", "a", "b"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("score", "taken", "skipped"),
        [(85, "approve", "reject"), (50, "reject", "approve")],
    )
    async def test_conditional_selects_branch(
        self, executor, branching_document, score, taken, skipped
    ):
        graph = WorkflowGraph.from_document(**branching_document)
        context = ExecutionContext(run_id=uuid4(), variables={"score": score})

        result = await executor.execute(graph, context)

        assert result.succeeded
        assert taken in result.visited
        assert skipped not in result.visited
        assert "check" not in result.output
        assert set(result.output) == {taken}

    @pytest.mark.asyncio
    async def test_unmatched_branch_stops_path(self, executor, context, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [
                make_node("start", "start"),
                make_node("check", "conditional", condition="missing > 1"),
                make_node("yes", "task"),
            ],
            [make_edge("start", "check"), make_edge("check", "yes", handle="a")],
        )

        result = await executor.execute(graph, context)

        assert result.succeeded
        assert result.visited == ["start", "check"]

    @pytest.mark.asyncio
    async def test_progress_monotonic_and_capped(self, executor, context, make_node, make_edge):
        ids = [f"t{i}" for i in range(3)]
        nodes = [make_node("start", "start")] + [make_node(i, "task") for i in ids]
        nodes.append(make_node("end", "end"))
        chain = ["start", *ids, "end"]
        edges = [make_edge(a, b) for a, b in zip(chain, chain[1:], strict=False)]
        graph = WorkflowGraph.from_document(nodes, edges)
        observer = RecordingObserver()

        await executor.execute(graph, context, observer)

        assert observer.percents == [0, 33, 67, 99, 99]
        assert observer.percents == sorted(observer.percents)

    @pytest.mark.asyncio
    async def test_no_executable_nodes(self, executor, context, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [make_node("start", "start"), make_node("end", "end")],
            [make_edge("start", "end")],
        )
        observer = RecordingObserver()

        result = await executor.execute(graph, context, observer)

        assert result.succeeded
        assert result.output == {}
        assert observer.percents == [50, 50]

    @pytest.mark.asyncio
    async def test_unknown_kind_continues(self, executor, context, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [
                make_node("start", "start"),
                make_node("odd", "hologram"),
                make_node("task", "task", label="After"),
            ],
            [make_edge("start", "odd"), make_edge("odd", "task")],
        )

        result = await executor.execute(graph, context)

        assert result.succeeded
        assert result.visited == ["start", "odd", "task"]
        assert "odd" not in result.output
        assert result.processed == 2

    @pytest.mark.asyncio
    async def test_failure_discards_results(self, registry, context, make_node, make_edge):
        registry.register("explode", ExplodingExecutor())
        graph = WorkflowGraph.from_document(
            [
                make_node("start", "start"),
                make_node("ok", "task"),
                make_node("boom", "explode"),
                make_node("never", "task"),
            ],
            [
                make_edge("start", "ok"),
                make_edge("ok", "boom"),
                make_edge("boom", "never"),
            ],
        )

        result = await WorkflowExecutor(registry).execute(graph, context)

        assert result.status == RunStatus.FAILED
        assert result.error == "boom exploded"
        assert result.output is None
        assert result.visited == ["start", "ok", "boom"]

    @pytest.mark.asyncio
    async def test_variables_flow_between_nodes(self, executor, make_node, make_edge):
        graph = WorkflowGraph.from_document(
            [
                make_node("start", "start"),
                make_node(
                    "shape",
                    "transform",
                    transform="uppercase",
                    inputVar="name",
                    outputVar="loud",
                ),
                make_node("check", "conditional", condition="loud == 'ADA'"),
                make_node("hit", "task", label="Matched"),
            ],
            [
                make_edge("start", "shape"),
                make_edge("shape", "check"),
                make_edge("check", "hit", handle="a"),
            ],
        )
        context = ExecutionContext(run_id=uuid4(), variables={"name": "ada"})

        result = await executor.execute(graph, context)

        assert context.variables["loud"] == "ADA"
        assert "hit" in result.visited


class TestNodeOutcome:
    """Test NodeOutcome constructors."""

    def test_constructors(self):
        assert NodeOutcome.empty().result is None
        assert NodeOutcome.of({"x": 1}).result == {"x": 1}
        assert NodeOutcome.take("b").branch == "b"
