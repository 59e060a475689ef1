"""Email node executor.

Delivery is simulated: the rendered message is logged and returned as
the node result.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors.base import (
    NodeExecutor,
    NodeOutcome,
    failure,
    utc_now_iso,
)
from aioffice.services.workflow.executors.templating import substitute

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_SUBJECT = "Workflow Notification"
DEFAULT_BODY = "This is an automated notification from your workflow."
SIMULATION_NOTE = "Email simulation - configure an email provider for actual sending"


class EmailExecutor(NodeExecutor):
    """Renders an email from the node's ``to``, ``subject`` and ``body``."""

    kinds = (NodeKind.EMAIL.value,)

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        to = node.get("to")
        if not to:
            return NodeOutcome.of(failure("No recipient configured"))
        to = str(to)
        if not EMAIL_PATTERN.match(to):
            return NodeOutcome.of(failure("Invalid email address format"))

        subject = substitute(str(node.get("subject") or DEFAULT_SUBJECT), context.variables)
        body = substitute(str(node.get("body") or DEFAULT_BODY), context.variables)

        logger.info(
            f"Email rendered for {to}",
            extra={
                "context": {
                    "run_id": str(context.run_id),
                    "node_id": node.id,
                    "subject": subject,
                    "action": "email_simulated",
                }
            },
        )

        return NodeOutcome.of(
            {
                "success": True,
                "to": to,
                "subject": subject,
                "body": body,
                "sentAt": utc_now_iso(),
                "note": SIMULATION_NOTE,
            }
        )
