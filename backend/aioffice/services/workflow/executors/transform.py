"""Transform node executor.

Applies one named transform to a variable (or to all variables) and
optionally stores the output in another variable. Transforms:

- ``uppercase`` / ``lowercase``: strings only
- ``length``: strings and lists
- ``json`` / ``stringify``: serialize any value
- ``parse``: parse a JSON string
- ``keys`` / ``values``: objects and lists
- ``get:<key>``: read one key of an object

Any other expression, or a transform applied to an unsupported input
type, passes the input through unchanged.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from aioffice.core.logging import get_logger
from aioffice.models.enums import NodeKind
from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome, failure

if TYPE_CHECKING:
    from aioffice.services.workflow.context import ExecutionContext
    from aioffice.services.workflow.graph import Node

logger = get_logger(__name__)


def apply_transform(expression: str, value: Any) -> Any:
    """Apply a transform expression to a value.

    Raises:
        ValueError: If ``parse`` receives invalid JSON.
    """
    name = expression.strip().lower()

    if name == "uppercase" and isinstance(value, str):
        return value.upper()
    if name == "lowercase" and isinstance(value, str):
        return value.lower()
    if name == "length" and isinstance(value, str | list):
        return len(value)
    if name in ("json", "stringify"):
        return json.dumps(value, default=str, separators=(",", ":"), ensure_ascii=False)
    if name == "parse" and isinstance(value, str):
        return json.loads(value)
    if name == "keys" and isinstance(value, dict):
        return list(value.keys())
    if name == "keys" and isinstance(value, list):
        return [str(i) for i in range(len(value))]
    if name == "values" and isinstance(value, dict):
        return list(value.values())
    if name == "values" and isinstance(value, list):
        return list(value)
    if name.startswith("get:") and isinstance(value, dict):
        return value.get(expression.strip()[4:].strip())

    logger.debug(f"Transform not evaluated, passing input through: {expression}")
    return value


class TransformExecutor(NodeExecutor):
    """Executor for transform nodes."""

    kinds = (NodeKind.TRANSFORM.value,)

    async def execute(self, node: Node, context: ExecutionContext) -> NodeOutcome:
        expression = node.get("transform")
        if not expression:
            return NodeOutcome.of(failure("No transform expression configured"))

        input_var = node.get("inputVar")
        value: Any = dict(context.variables)
        if isinstance(input_var, str) and input_var in context.variables:
            value = context.variables[input_var]

        try:
            output = apply_transform(str(expression), value)
        except ValueError as e:
            return NodeOutcome.of(failure(str(e) or "Transform failed"))

        output_var = node.get("outputVar")
        if output_var:
            context.set_variable(str(output_var), output)

        return NodeOutcome.of(
            {
                "success": True,
                "input": value,
                "output": output,
                "transform": expression,
            }
        )
