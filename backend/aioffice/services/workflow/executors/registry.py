"""Executor registry.

Maps node kinds to executor instances. Adding a node kind is a
``register`` call; the traversal engine never switches on kinds itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from aioffice.services.workflow.executors.base import NodeExecutor
from aioffice.services.workflow.executors.passthrough import UnknownKindExecutor

if TYPE_CHECKING:
    from aioffice.services.outbound.http_client import OutboundHttpClient
    from aioffice.services.text_generation import TextGenerator


class ExecutorRegistry:
    """Registry for node executor lookup.

    Example:
        registry = ExecutorRegistry(http_client=client, text_generator=None)
        executor = registry.get("task")
        outcome = await executor.execute(node, context)
    """

    def __init__(
        self,
        http_client: OutboundHttpClient | None = None,
        text_generator: TextGenerator | None = None,
        register_defaults: bool = True,
    ) -> None:
        """Initialize registry and optionally register the built-in executors.

        Args:
            http_client: Client for webhook, http and social nodes.
                A new one is created when omitted.
            text_generator: Collaborator for task nodes. Tasks complete
                with a stub when None.
            register_defaults: Register the built-in executors.
        """
        self._executors: dict[str, NodeExecutor] = {}
        self._fallback: NodeExecutor = UnknownKindExecutor()
        self._http_client = http_client
        self._text_generator = text_generator
        if register_defaults:
            self._register_defaults()

    def _register_defaults(self) -> None:
        """Register the built-in executors for every palette kind."""
        # Import here to avoid circular dependencies
        from aioffice.services.outbound.http_client import OutboundHttpClient
        from aioffice.services.workflow.executors.conditional import ConditionalExecutor
        from aioffice.services.workflow.executors.delay import DelayExecutor
        from aioffice.services.workflow.executors.email_message import EmailExecutor
        from aioffice.services.workflow.executors.http_request import HttpRequestExecutor
        from aioffice.services.workflow.executors.loop import LoopExecutor
        from aioffice.services.workflow.executors.passthrough import StructuralExecutor
        from aioffice.services.workflow.executors.social import SocialPostExecutor
        from aioffice.services.workflow.executors.task import TaskExecutor
        from aioffice.services.workflow.executors.transform import TransformExecutor
        from aioffice.services.workflow.executors.webhook import WebhookExecutor

        if self._http_client is None:
            self._http_client = OutboundHttpClient()
        client = self._http_client

        defaults: list[NodeExecutor] = [
            StructuralExecutor(),
            TaskExecutor(self._text_generator),
            ConditionalExecutor(),
            WebhookExecutor(client),
            DelayExecutor(),
            LoopExecutor(),
            EmailExecutor(),
            TransformExecutor(),
            HttpRequestExecutor(client),
            SocialPostExecutor(client),
        ]

        for executor in defaults:
            for kind in executor.kinds:
                self.register(kind, executor)

    def register(self, kind: str, executor: NodeExecutor) -> None:
        """Register an executor for a node kind.

        An existing registration for the kind is replaced.
        """
        self._executors[kind] = executor

    def unregister(self, kind: str) -> None:
        """Remove the executor for a kind; unknown kinds are ignored."""
        self._executors.pop(kind, None)

    def get(self, kind: str) -> NodeExecutor:
        """Get the executor for a node kind.

        Returns:
            The registered executor, or the no-op fallback for unknown kinds.
        """
        return self._executors.get(kind, self._fallback)

    def is_registered(self, kind: str) -> bool:
        """Check whether a kind has its own executor."""
        return kind in self._executors

    def list_registered(self) -> list[str]:
        """List all registered node kinds."""
        return list(self._executors.keys())

    async def aclose(self) -> None:
        """Close the clients shared by the registered executors."""
        for resource in (self._http_client, self._text_generator):
            close = getattr(resource, "aclose", None)
            if close is not None:
                await close()


# Module-level singleton for convenience
_registry: ExecutorRegistry | None = None


def get_registry() -> ExecutorRegistry:
    """Get the global executor registry, created on first call with the
    configured text generator.
    """
    global _registry
    if _registry is None:
        from aioffice.services.text_generation import get_text_generator

        _registry = ExecutorRegistry(text_generator=get_text_generator())
    return _registry


def reset_registry() -> None:
    """Drop the global registry so the next call rebuilds it."""
    global _registry
    _registry = None


__all__ = [
    "ExecutorRegistry",
    "get_registry",
    "reset_registry",
]
