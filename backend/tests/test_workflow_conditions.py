"""Tests for condition expression evaluation."""

import math
from unittest.mock import patch

import pytest

from aioffice.services.workflow.conditions import (
    UNDEFINED,
    ComparisonOperator,
    Literal,
    ResultPathRef,
    VariableRef,
    evaluate,
    js_truthy,
    parse_comparison,
    parse_operand,
    strict_equals,
    to_number,
)
from aioffice.services.workflow.context import ExecutionContext


def ctx(**variables) -> ExecutionContext:
    return ExecutionContext(variables=variables)


class TestParseOperand:
    """Test operand classification."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("'approved'", Literal("approved")),
            ('"approved"', Literal("approved")),
            ("80", Literal(80.0)),
            ("-2.5", Literal(-2.5)),
            ("true", Literal(True)),
            ("false", Literal(False)),
            ("score", VariableRef("score")),
        ],
    )
    def test_operand_kinds(self, text, expected):
        assert parse_operand(text) == expected

    def test_results_path(self):
        operand = parse_operand("results.task-1.success")

        assert isinstance(operand, ResultPathRef)
        assert operand.path == ("task-1", "success")


class TestParseComparison:
    """Test operator scanning."""

    def test_greater_equal_not_split_as_greater(self):
        comparison = parse_comparison("x >= 10")

        assert comparison.operator is ComparisonOperator.GREATER_EQUAL
        assert comparison.left == VariableRef("x")
        assert comparison.right == Literal(10.0)

    def test_strict_operators_take_priority(self):
        assert parse_comparison("a === b").operator is ComparisonOperator.STRICT_EQUAL
        assert parse_comparison("a !== b").operator is ComparisonOperator.STRICT_NOT_EQUAL
        assert parse_comparison("a != b").operator is ComparisonOperator.NOT_EQUAL

    def test_no_operator(self):
        assert parse_comparison("approved") is None


class TestEvaluate:
    """Test evaluate() end to end."""

    @pytest.mark.parametrize("expression", [None, ""])
    def test_empty_expression_is_true(self, expression):
        assert evaluate(expression, ctx()) is True

    @pytest.mark.parametrize("expression", [True, 1, ["x"], {"x": 1}])
    def test_non_string_expression_is_false(self, expression):
        assert evaluate(expression, ctx(x=1)) is False

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [("true", True), ("TRUE", True), (" false ", False), ("False", False)],
    )
    def test_boolean_literals(self, expression, expected):
        assert evaluate(expression, ctx()) is expected

    def test_score_threshold(self):
        assert evaluate("score >= 80", ctx(score=90)) is True
        assert evaluate("score >= 80", ctx(score=70)) is False

    def test_greater_equal_boundary(self):
        assert evaluate("x >= 10", ctx(x=10)) is True

    def test_equality_without_coercion(self):
        assert evaluate("count == 5", ctx(count=5)) is True
        assert evaluate("count == 5", ctx(count="5")) is False

    def test_boolean_not_equal_to_number(self):
        assert evaluate("flag == 1", ctx(flag=True)) is False
        assert evaluate("flag == true", ctx(flag=True)) is True

    def test_string_equality(self):
        assert evaluate("status == 'approved'", ctx(status="approved")) is True
        assert evaluate("status != 'approved'", ctx(status="rejected")) is True

    def test_relational_coerces_numeric_strings(self):
        assert evaluate("score > 50", ctx(score="75")) is True

    def test_relational_with_non_numeric_is_false(self):
        assert evaluate("name > 5", ctx(name="alice")) is False
        assert evaluate("name < 5", ctx(name="alice")) is False

    def test_missing_variable_compares_as_its_name(self):
        assert evaluate("status == status", ctx()) is True
        assert evaluate("missing > 1", ctx()) is False

    def test_results_path_lookup(self):
        context = ctx()
        context.record_result("task-1", {"success": True, "items": [10, 20]})

        assert evaluate("results.task-1.success == true", context) is True
        assert evaluate("results.task-1.items.1 == 20", context) is True
        assert evaluate("results.task-2.success == true", context) is False

    def test_variable_named_like_path_wins(self):
        context = ctx(**{"results.custom": 3})

        assert evaluate("results.custom == 3", context) is True

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, True), (False, False), ("", False), ("yes", True), (0, False), (2, True), ([], True)],
    )
    def test_bare_variable_truthiness(self, value, expected):
        assert evaluate("approved", ctx(approved=value)) is expected

    def test_bare_unknown_variable_is_false(self):
        assert evaluate("approved", ctx()) is False

    def test_deterministic(self):
        context = ctx(score=85)

        assert evaluate("score >= 80", context) == evaluate("score >= 80", context)

    def test_errors_yield_false(self):
        with patch(
            "aioffice.services.workflow.conditions.parse_comparison",
            side_effect=RuntimeError("parser exploded"),
        ):
            assert evaluate("score >= 80", ctx(score=90)) is False


class TestValueSemantics:
    """Test JavaScript-style coercion helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("", 0.0), ("  12 ", 12.0), ("0x10", 16.0), (True, 1.0), (None, 0.0), ([], 0.0), (["7"], 7.0)],
    )
    def test_to_number(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", UNDEFINED, {"a": 1}, [1, 2]])
    def test_to_number_nan(self, value):
        assert math.isnan(to_number(value))

    def test_strict_equals(self):
        assert strict_equals(5, 5.0) is True
        assert strict_equals(5, "5") is False
        assert strict_equals(1, True) is False
        assert strict_equals(math.nan, math.nan) is False
        assert strict_equals(None, None) is True
        assert strict_equals(UNDEFINED, None) is False

    def test_js_truthy(self):
        assert js_truthy(math.nan) is False
        assert js_truthy({}) is True
        assert js_truthy(UNDEFINED) is False
