"""Task node executor.

Task-like nodes (task, assignment, qa, kpi, report) ask the text
generation collaborator to carry out the node's description. A task never
fails the run: without a description, without a generator, or when
generation fails, the result is a completion stub.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.text_generation import TextGenerationError, TextGenerator
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant executing a workflow task. "
    "Perform the requested task and return a concise result."
)
EMPTY_GENERATION_OUTPUT = "Task completed"


def build_user_prompt(label: str, description: str, variables: dict) -> str:
    """Compose the prompt describing a task and the run's variables."""
    context_json = json.dumps(variables, default=str, ensure_ascii=False)
    return f"Task: {label}\nDescription: {description}\nContext: {context_json}"


def completion_stub(label: str) -> dict[str, object]:
    """Result recorded when a task is not delegated to text generation."""
    return {"success": True, "output": f'Task "{label}" completed'}


class TaskExecutor(NodeExecutor):
    """Executor for task-like nodes.

    Attributes:
        generator: Text generation collaborator, None when disabled.
    """

    kinds = (
        NodeKind.TASK.value,
        NodeKind.ASSIGNMENT.value,
        NodeKind.QA.value,
        NodeKind.KPI.value,
        NodeKind.REPORT.value,
    )

    def __init__(self, generator: TextGenerator | None = None) -> None:
        self.generator = generator

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        label = node.label
        description = node.get("description")

        if not description or self.generator is None:
            return NodeOutcome.of(completion_stub(label))

        user_prompt = build_user_prompt(label, str(description), context.variables)
        try:
            output = await self.generator.generate(SYSTEM_PROMPT, user_prompt)
        except TextGenerationError as e:
            logger.warning(
                f"Text generation failed for task '{label}': {e.message}",
                extra={
                    "context": {
                        "run_id": str(context.run_id),
                        "node_id": node.id,
                        "status_code": e.status_code,
                    }
                },
            )
            return NodeOutcome.of(completion_stub(label))
        except Exception as e:
            logger.error(
                f"Unexpected text generation error for task '{label}': {e}",
                exc_info=True,
                extra={"context": {"run_id": str(context.run_id), "node_id": node.id}},
            )
            return NodeOutcome.of(completion_stub(label))

        return NodeOutcome.of({"success": True, "output": output or EMPTY_GENERATION_OUTPUT})
