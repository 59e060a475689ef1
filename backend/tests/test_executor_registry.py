"""Tests for ExecutorRegistry."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors import (
    ConditionalExecutor,
    ExecutorRegistry,
    SocialPostExecutor,
    TaskExecutor,
    UnknownKindExecutor,
    get_registry,
    reset_registry,
)
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome


class EchoExecutor(NodeExecutor):
    kinds = ("echo",)

    async def execute(self, node, context):
        return NodeOutcome.of({"echo": node.id})


class TestExecutorRegistry:
    """Test executor registration and lookup."""

    def test_every_node_kind_registered(self, registry):
        for kind in NodeKind:
            assert registry.is_registered(kind.value), kind

    def test_lookup_by_kind(self, registry):
        assert isinstance(registry.get("task"), TaskExecutor)
        assert isinstance(registry.get("report"), TaskExecutor)
        assert isinstance(registry.get("conditional"), ConditionalExecutor)
        assert isinstance(registry.get("instagram"), SocialPostExecutor)

    def test_unknown_kind_falls_back(self, registry):
        assert isinstance(registry.get("mystery"), UnknownKindExecutor)
        assert registry.is_registered("mystery") is False

    def test_register_and_unregister(self, registry):
        registry.register("echo", EchoExecutor())
        assert isinstance(registry.get("echo"), EchoExecutor)
        assert "echo" in registry.list_registered()

        registry.unregister("echo")
        assert isinstance(registry.get("echo"), UnknownKindExecutor)

    def test_empty_registry(self):
        registry = ExecutorRegistry(register_defaults=False)

        assert registry.list_registered() == []

    def test_outbound_executors_share_client(self, registry, mock_http_client):
        assert registry.get("webhook").http_client is mock_http_client
        assert registry.get("http").http_client is mock_http_client
        assert registry.get("twitter").http_client is mock_http_client

    @pytest.mark.asyncio
    async def test_aclose_closes_clients(self, mock_http_client):
        generator = MagicMock()
        generator.aclose = AsyncMock()
        registry = ExecutorRegistry(http_client=mock_http_client, text_generator=generator)

        await registry.aclose()

        mock_http_client.aclose.assert_awaited_once()
        generator.aclose.assert_awaited_once()


class TestGlobalRegistry:
    """Test the module-level singleton."""

    def test_singleton(self):
        reset_registry()
        try:
            assert get_registry() is get_registry()
        finally:
            reset_registry()
