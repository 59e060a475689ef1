"""Condition evaluation for conditional nodes.

Conditions are short expressions written in the editor, for example
``score >= 80``, ``status == 'approved'`` or ``results.task-1.success``.
An expression is either a boolean literal, a single variable name whose
truthiness decides the branch, or one comparison between two operands.

Operands are parsed into a small tagged grammar (``Literal``,
``VariableRef``, ``ResultPathRef``) and resolved against the run's
``ExecutionContext``. Relational operators coerce both sides to numbers
the way the editor's JavaScript runtime does; equality operators compare
resolved values as-is, so the number ``5`` and the string ``"5"`` are not
equal.

Evaluation never raises. Any error is logged and the condition is
treated as false, which routes the run down the false branch.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from aioffice.core.logging import get_logger
from aioffice.services.workflow.context import ExecutionContext

logger = get_logger(__name__)

RESULTS_PREFIX = "results."


class _Undefined:
    """Marker for a value that does not exist (missing result path)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()


# =============================================================================
# Operators
# =============================================================================


class ComparisonOperator(str, Enum):
    """Comparison operators in scan priority order.

    Longer tokens come first so ``>=`` is never read as ``>``.
    """

    STRICT_EQUAL = "==="
    STRICT_NOT_EQUAL = "!=="
    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER = ">"
    LESS = "<"

    def __str__(self) -> str:
        """Return the token for serialization."""
        return self.value

    @property
    def is_equality(self) -> bool:
        """True for the four (in)equality operators."""
        return self in _EQUALITY_OPERATORS

    def apply(self, left: Any, right: Any) -> bool:
        """Compare two resolved operand values."""
        if self in (ComparisonOperator.STRICT_EQUAL, ComparisonOperator.EQUAL):
            return strict_equals(left, right)
        if self in (ComparisonOperator.STRICT_NOT_EQUAL, ComparisonOperator.NOT_EQUAL):
            return not strict_equals(left, right)

        lhs, rhs = to_number(left), to_number(right)
        if self is ComparisonOperator.GREATER_EQUAL:
            return lhs >= rhs
        if self is ComparisonOperator.LESS_EQUAL:
            return lhs <= rhs
        if self is ComparisonOperator.GREATER:
            return lhs > rhs
        return lhs < rhs


_EQUALITY_OPERATORS = frozenset(
    {
        ComparisonOperator.STRICT_EQUAL,
        ComparisonOperator.STRICT_NOT_EQUAL,
        ComparisonOperator.EQUAL,
        ComparisonOperator.NOT_EQUAL,
    }
)


# =============================================================================
# Operand grammar
# =============================================================================


@dataclass(frozen=True)
class Literal:
    """A quoted string, number or boolean written in the expression."""

    value: Any

    def resolve(self, context: ExecutionContext) -> Any:  # noqa: ARG002
        return self.value


@dataclass(frozen=True)
class VariableRef:
    """A bare word.

    Resolves to the variable of that name, or to the word itself when no
    such variable exists.
    """

    name: str

    def resolve(self, context: ExecutionContext) -> Any:
        if self.name in context.variables:
            return context.variables[self.name]
        return self.name


@dataclass(frozen=True)
class ResultPathRef:
    """A ``results.<node>.<key>...`` path into earlier node results.

    A variable whose name is the full path text takes precedence.
    """

    raw: str
    path: tuple[str, ...]

    def resolve(self, context: ExecutionContext) -> Any:
        if self.raw in context.variables:
            return context.variables[self.raw]

        value: Any = context.results
        for key in self.path:
            if isinstance(value, Mapping):
                value = value.get(key, UNDEFINED)
            elif isinstance(value, list):
                value = _index(value, key)
            else:
                return UNDEFINED
        return value


Operand = Literal | VariableRef | ResultPathRef


@dataclass(frozen=True)
class Comparison:
    """A parsed ``<operand> <operator> <operand>`` expression."""

    left: Operand
    operator: ComparisonOperator
    right: Operand

    def evaluate(self, context: ExecutionContext) -> bool:
        return self.operator.apply(
            self.left.resolve(context),
            self.right.resolve(context),
        )


def parse_operand(text: str) -> Operand:
    """Classify one trimmed operand string.

    Order: quoted string, number, ``true``/``false``, result path, bare
    word. Whether a bare word is a variable is decided at resolve time.
    """
    if len(text) >= 1 and text[0] in "\"'" and text[-1] == text[0]:
        return Literal(text[1:-1])

    number = _parse_number(text)
    if not math.isnan(number):
        return Literal(number)

    if text == "true":
        return Literal(True)
    if text == "false":
        return Literal(False)

    if text.startswith(RESULTS_PREFIX):
        return ResultPathRef(raw=text, path=tuple(text.split(".")[1:]))

    return VariableRef(text)


def parse_comparison(expression: str) -> Comparison | None:
    """Split an expression on the first operator found in priority order.

    Returns:
        The parsed comparison, or None when the expression contains no
        operator token.
    """
    for operator in ComparisonOperator:
        left, found, right = expression.partition(operator.value)
        if found:
            return Comparison(
                left=parse_operand(left.strip()),
                operator=operator,
                right=parse_operand(right.strip()),
            )
    return None


# =============================================================================
# Evaluation
# =============================================================================


def evaluate(expression: Any, context: ExecutionContext) -> bool:
    """Evaluate a condition expression against a run context.

    Args:
        expression: Condition text from the node. Empty means "always true";
            a non-empty value that is not a string is an evaluation error.
        context: Variables and results of the current run.

    Returns:
        The boolean outcome. False on any evaluation error.
    """
    if not expression:
        return True

    try:
        if not isinstance(expression, str):
            raise TypeError(f"condition must be a string, got {type(expression).__name__}")
        trimmed = expression.strip()
        lowered = trimmed.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False

        comparison = parse_comparison(expression)
        if comparison is not None:
            return comparison.evaluate(context)

        return js_truthy(context.variables.get(trimmed, UNDEFINED))
    except Exception as e:
        logger.warning(
            f"Condition evaluation failed: {e}",
            extra={"context": {"expression": str(expression), "error": str(e)}},
        )
        return False


# =============================================================================
# JavaScript value semantics
# =============================================================================

_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX = {"0x": 16, "0o": 8, "0b": 2}


def _parse_number(text: str) -> float:
    """Parse a string the way ``Number(text)`` does; NaN when not numeric."""
    stripped = text.strip()
    if stripped == "":
        return 0.0
    if _DECIMAL.match(stripped):
        return float(stripped)
    if stripped in ("Infinity", "+Infinity"):
        return math.inf
    if stripped == "-Infinity":
        return -math.inf
    prefix = stripped[:2].lower()
    if prefix in _RADIX:
        try:
            return float(int(stripped[2:], _RADIX[prefix]))
        except ValueError:
            return math.nan
    return math.nan


def to_number(value: Any) -> float:
    """Coerce a resolved value to a number."""
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        return _parse_number(value)
    if isinstance(value, list):
        if not value:
            return 0.0
        if len(value) == 1:
            return to_number(_to_js_string(value[0]))
        return math.nan
    return math.nan


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values without type coercion.

    Booleans never equal numbers, numbers never equal strings, NaN never
    equals anything, and containers are only equal to themselves.
    """
    if left is UNDEFINED or right is UNDEFINED:
        return left is right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, int | float) and isinstance(right, int | float):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, list | dict) or isinstance(right, list | dict):
        return left is right
    return type(left) is type(right) and left == right


def js_truthy(value: Any) -> bool:
    """Truthiness of a value: empty containers are truthy, NaN is falsy."""
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _to_js_string(value: Any) -> str:
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _index(items: list[Any], key: str) -> Any:
    if key.isdigit() and int(key) < len(items):
        return items[int(key)]
    return UNDEFINED


__all__ = [
    "UNDEFINED",
    "Comparison",
    "ComparisonOperator",
    "Literal",
    "Operand",
    "ResultPathRef",
    "VariableRef",
    "evaluate",
    "js_truthy",
    "parse_comparison",
    "parse_operand",
    "strict_equals",
    "to_number",
]
