"""HTTP request node executor."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.outbound.http_client import OutboundHttpClient
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome, failure
from aioffice.services.workflow.executors.templating import (
    escape_for_json,
    sanitize_identifier,
    substitute,
    to_text,
)

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def parse_headers(raw: Any) -> dict[str, str]:
    """Read custom headers from a JSON object string or a mapping.

    Unparseable input is ignored.
    """
    if not raw:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Failed to parse headers JSON, using defaults")
            return {}
    if not isinstance(raw, dict):
        return {}
    return {str(key): str(value) for key, value in raw.items()}


def render_body(raw: Any, variables: dict[str, Any]) -> str:
    """Render a request body with placeholders substituted.

    Bodies that look like JSON get JSON-escaped values.
    """
    if isinstance(raw, dict | list):
        return json.dumps(raw, default=str)
    body = str(raw)
    is_json = body.strip().startswith(("{", "["))
    return substitute(body, variables, escape_for_json if is_json else to_text)


class HttpRequestExecutor(NodeExecutor):
    """Sends an arbitrary HTTP request and stores the response body.

    The decoded response is written to the variable
    ``http_<node id with non-alphanumerics replaced by _>``.
    """

    kinds = (NodeKind.HTTP.value,)

    def __init__(self, http_client: OutboundHttpClient) -> None:
        self.http_client = http_client

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        url = node.get("url")
        if not url:
            return NodeOutcome.of(failure("No URL configured"))

        method = str(node.get("method") or "GET").upper()
        headers = parse_headers(node.get("headers"))

        content: str | None = None
        raw_body = node.get("body")
        if raw_body and method in BODY_METHODS:
            content = render_body(raw_body, context.variables)

        call = await self.http_client.request(method, str(url), content=content, headers=headers)
        if not call.responded:
            return NodeOutcome.of(failure(call.error or "HTTP request failed"))

        output_var = f"http_{sanitize_identifier(node.id)}"
        context.set_variable(output_var, call.data)

        return NodeOutcome.of(
            {
                "success": call.success,
                "status": call.status,
                "statusText": call.status_text,
                "data": call.data,
                "outputVar": output_var,
            }
        )
