"""Social media node executor.

Posting is delegated to an automation webhook configured on the node;
the engine only builds the post and forwards it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.outbound.http_client import OutboundHttpClient
from aioffice.services.workflow.executors.base import (
    NodeExecutor,
    NodeOutcome,
    failure,
    utc_now_iso,
)
from aioffice.services.workflow.executors.templating import sanitize_identifier, substitute

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)

MISSING_WEBHOOK_ERROR = (
    "No automation webhook URL configured. "
    "Please set up a webhook to handle social media posting."
)


class SocialPostExecutor(NodeExecutor):
    """Executor for twitter, linkedin, instagram and facebook nodes.

    Content over the platform's character limit is logged, not rejected.
    """

    kinds = (
        NodeKind.TWITTER.value,
        NodeKind.LINKEDIN.value,
        NodeKind.INSTAGRAM.value,
        NodeKind.FACEBOOK.value,
    )

    CHARACTER_LIMITS: ClassVar[dict[str, int]] = {
        NodeKind.TWITTER.value: 280,
        NodeKind.LINKEDIN.value: 3000,
        NodeKind.INSTAGRAM.value: 2200,
        NodeKind.FACEBOOK.value: 63206,
    }
    DEFAULT_LIMIT: ClassVar[int] = 3000

    def __init__(self, http_client: OutboundHttpClient) -> None:
        self.http_client = http_client

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        platform = node.kind
        webhook_url = node.get("webhookUrl")
        if not webhook_url:
            return NodeOutcome.of(failure(MISSING_WEBHOOK_ERROR))

        content = substitute(str(node.get("content") or ""), context.variables)
        hashtags = substitute(str(node.get("hashtags") or ""), context.variables)
        full_content = f"{content}\n\n{hashtags}".strip() if hashtags else content

        limit = self.CHARACTER_LIMITS.get(platform, self.DEFAULT_LIMIT)
        if len(full_content) > limit:
            logger.warning(
                f"Content exceeds {platform} character limit: {len(full_content)}/{limit}",
                extra={"context": {"run_id": str(context.run_id), "node_id": node.id}},
            )

        scheduled_at = node.get("scheduledAt") or None
        payload: dict[str, Any] = {
            "platform": platform,
            "action": "post",
            "content": content,
            "hashtags": hashtags,
            "fullContent": full_content,
            "mediaUrl": node.get("mediaUrl") or None,
            "scheduledAt": scheduled_at,
            "isScheduled": bool(scheduled_at),
            "workflowId": str(context.workflow_id) if context.workflow_id is not None else None,
            "runId": str(context.run_id) if context.run_id is not None else None,
            "nodeId": node.id,
            "nodeLabel": node.get("label"),
            "variables": context.variables,
            "timestamp": utc_now_iso(),
        }

        call = await self.http_client.post_json(str(webhook_url), payload)
        if not call.responded:
            return NodeOutcome.of(
                failure(call.error or "Social media post failed", platform=platform)
            )

        output_var = f"social_{platform}_{sanitize_identifier(node.id)}"
        context.set_variable(output_var, call.data)

        return NodeOutcome.of(
            {
                "success": call.success,
                "platform": platform,
                "status": call.status,
                "contentLength": len(full_content),
                "characterLimit": limit,
                "isScheduled": bool(scheduled_at),
                "scheduledAt": scheduled_at,
                "data": call.data,
                "outputVar": output_var,
            }
        )
