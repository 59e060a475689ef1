"""pytest configuration and fixtures.

Provides a SQLite database per test, a workflow runner wired to it with
mocked outbound collaborators, an HTTP client for the API, and builders
for editor-style workflow documents.

The database lives in a temporary file rather than in memory so the
sessions opened by background run tasks see the rows committed by the
request that started them.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any, cast
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.types import ASGIApp

from aioffice.db.session import build_engine, build_session_factory, get_db
from aioffice.main import app
from aioffice.models import Base, Workflow
from aioffice.services.outbound.http_client import HttpCallResult, OutboundHttpClient
from aioffice.services.workflow.executors.registry import ExecutorRegistry
from aioffice.services.workflow.runner import WorkflowRunner, get_runner


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that run workflows against the database",
    )
    config.addinivalue_line(
        "markers",
        "asyncio: marks tests as async (pytest-asyncio)",
    )


# =============================================================================
# DATABASE FIXTURES (SQLite file per test)
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create an async SQLite engine with all tables created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'workflow_engine.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_session_maker(
    async_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return build_session_factory(async_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    async_session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for direct model access."""
    async with async_session_maker() as session:
        yield session


# =============================================================================
# RUNNER FIXTURES
# =============================================================================


@pytest.fixture
def mock_http_client() -> MagicMock:
    """Outbound client whose calls return a 200 JSON response by default."""
    client = MagicMock(spec=OutboundHttpClient)
    ok = HttpCallResult(success=True, status=200, status_text="OK", data={"ok": True})
    client.post_json = AsyncMock(return_value=ok)
    client.request = AsyncMock(return_value=ok)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def registry(mock_http_client: MagicMock) -> ExecutorRegistry:
    """Executor registry with a mocked outbound client and no text generator."""
    return ExecutorRegistry(http_client=mock_http_client, text_generator=None)


@pytest_asyncio.fixture(scope="function")
async def runner(
    async_session_maker: async_sessionmaker[AsyncSession],
    registry: ExecutorRegistry,
) -> AsyncGenerator[WorkflowRunner]:
    """Workflow runner writing to the test database.

    Background runs are drained before the engine is disposed.
    """
    workflow_runner = WorkflowRunner(
        session_factory=async_session_maker,
        registry=registry,
    )
    try:
        yield workflow_runner
    finally:
        await workflow_runner.scheduler.drain()


# =============================================================================
# HTTP CLIENT FIXTURE
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_client(
    async_session_maker: async_sessionmaker[AsyncSession],
    runner: WorkflowRunner,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing API endpoints."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        """Same commit/rollback behaviour as the real dependency."""
        async with async_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_runner] = lambda: runner

    try:
        transport = ASGITransport(app=cast("ASGIApp", app))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# DOCUMENT BUILDERS
# =============================================================================


@pytest.fixture
def make_node() -> Callable[..., dict[str, Any]]:
    """Build an editor node: ``make_node("task-1", "task", label="Draft")``."""

    def _make(node_id: str, kind: str, **data: Any) -> dict[str, Any]:
        return {
            "id": node_id,
            "type": kind,
            "position": {"x": 0, "y": 0},
            "data": data,
        }

    return _make


@pytest.fixture
def make_edge() -> Callable[..., dict[str, Any]]:
    """Build an editor edge: ``make_edge("start", "task-1", handle="a")``."""

    def _make(source: str, target: str, handle: str | None = None) -> dict[str, Any]:
        edge: dict[str, Any] = {
            "id": f"e-{source}-{target}",
            "source": source,
            "target": target,
        }
        if handle is not None:
            edge["sourceHandle"] = handle
        return edge

    return _make


@pytest.fixture
def office_id() -> UUID:
    """Provide a consistent office ID for testing."""
    return UUID("00000000-0000-0000-0000-00000000a001")


@pytest.fixture
def linear_document(make_node, make_edge) -> dict[str, list[dict[str, Any]]]:
    """start -> task -> end."""
    return {
        "nodes": [
            make_node("start", "start"),
            make_node("task-1", "task", label="Draft summary"),
            make_node("end", "end"),
        ],
        "edges": [
            make_edge("start", "task-1"),
            make_edge("task-1", "end"),
        ],
    }


@pytest.fixture
def branching_document(make_node, make_edge) -> dict[str, list[dict[str, Any]]]:
    """start -> conditional(score >= 80) -> approve (a) | reject (b) -> end."""
    return {
        "nodes": [
            make_node("start", "start"),
            make_node("check", "conditional", condition="score >= 80"),
            make_node("approve", "task", label="Approve"),
            make_node("reject", "task", label="Reject"),
            make_node("end", "end"),
        ],
        "edges": [
            make_edge("start", "check"),
            make_edge("check", "approve", handle="a"),
            make_edge("check", "reject", handle="b"),
            make_edge("approve", "end"),
            make_edge("reject", "end"),
        ],
    }


@pytest.fixture
def workflow_factory(
    async_session_maker: async_sessionmaker[AsyncSession],
    office_id: UUID,
) -> Callable[..., Any]:
    """Persist a workflow document and return the stored row."""

    async def _create(
        nodes: list[dict[str, Any]],
        edges: list[dict[str, Any]] | None = None,
        name: str = "Test Workflow",
    ) -> Workflow:
        async with async_session_maker() as session:
            workflow = Workflow(
                id=uuid4(),
                office_id=office_id,
                name=name,
                nodes=nodes,
                edges=edges or [],
            )
            session.add(workflow)
            await session.commit()
            return workflow

    return _create
