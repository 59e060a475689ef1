"""Webhook node executor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aioffice.models.enums import NodeKind
from aioffice.services.outbound.http_client import OutboundHttpClient
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome, failure

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node


class WebhookExecutor(NodeExecutor):
    """POSTs the run envelope to the node's ``url``.

    Result is ``{success, status, data}`` when the endpoint responded,
    otherwise ``{success: False, error}``.
    """

    kinds = (NodeKind.WEBHOOK.value,)

    def __init__(self, http_client: OutboundHttpClient) -> None:
        self.http_client = http_client

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        url = node.get("url")
        if not url:
            return NodeOutcome.of(failure("No URL configured"))

        call = await self.http_client.post_json(str(url), context.envelope(node.id))
        return NodeOutcome.of(call.to_dict())
