"""Tests for the evaluator and calculate()."""

import pytest
from lisparse import (
    ARITHMETIC_OPERATORS, Absent, ArityError, DivisionByZero, ErrorKind,
    Evaluation, InvalidNumber, Literal, NestingTooDeep, Sequence, UnknownOperator,
    calculate, evaluate, fold_without_identity, nary_fold, parse,
    truncating_div,
)


class TestCalculate:
    """End-to-end evaluation of lines."""

    @pytest.mark.parametrize("text,expected", [
        ("(+ 1 2)", 3),
        ("(+ )", 0),
        ("(* )", 1),
        ("(- 5 2 1)", 2),
        ("(/ 10 2)", 5),
        ("-11", -11),
        ("+7", 7),
        ("(+ 1 (* 2 3))", 7),
        ("(* 2 3 4)", 24),
        ("(- 5)", 5),
        ("(/ 7 2)", 3),
        ("(/ -7 2)", -3),
        ("(/ 7 -2)", -3),
        ("(+ -1 (- 0 4))", -5),
    ])
    def test_values(self, text, expected):
        result = calculate(text)
        assert result
        assert result.value == expected

    @pytest.mark.parametrize("text,kind", [
        ("(/ 5 0)", ErrorKind.DIVISION_BY_ZERO),
        ("(- )", ErrorKind.ARITY_ERROR),
        ("(/ )", ErrorKind.ARITY_ERROR),
        ("(% 5 2)", ErrorKind.UNKNOWN_OPERATOR),
        ("(+ 1 x)", ErrorKind.INVALID_NUMBER),
        ("12x", ErrorKind.INVALID_NUMBER),
        ("--1", ErrorKind.INVALID_NUMBER),
        ("(+ 1 2", ErrorKind.ALTERNATIVES_EXHAUSTED),
        ("(+ 1 2))", ErrorKind.TRAILING_INPUT),
    ])
    def test_errors(self, text, kind):
        result = calculate(text)
        assert not result
        assert result.kind == kind
        assert result.value is None
        assert result.message

    def test_parse_error_has_no_tree(self):
        assert calculate("(").tree is None

    def test_evaluation_error_keeps_tree(self):
        result = calculate("(/ 5 0)")
        assert result.tree == parse("(/ 5 0)").value
        assert isinstance(result.error, DivisionByZero)

    def test_first_error_left_to_right(self):
        """Operands are folded in order; the first error wins."""
        assert calculate("(/ 5 0 (% 1))").kind == ErrorKind.DIVISION_BY_ZERO
        assert calculate("(/ 5 (% 1) 0)").kind == ErrorKind.UNKNOWN_OPERATOR

    def test_custom_operators(self):
        ops = {**ARITHMETIC_OPERATORS, "max": fold_without_identity(max, "max")}
        assert calculate("(max 3 9 4)", ops).value == 9
        assert calculate("(max 3 9 4)").kind == ErrorKind.UNKNOWN_OPERATOR

    def test_repr(self):
        assert repr(calculate("(+ 1 2)")) == "Evaluation(3)"
        assert "division_by_zero" in repr(calculate("(/ 1 0)"))

    def test_deep_nesting_reported(self):
        """Nesting past the interpreter stack is an error result, not a crash."""
        depth = 1000
        result = calculate("(+ " * depth + "1" + ")" * depth)
        assert not result
        assert result.kind == ErrorKind.NESTING_TOO_DEEP
        assert isinstance(result.error, NestingTooDeep)

    def test_moderate_nesting_evaluates(self):
        depth = 20
        assert calculate("(+ " * depth + "1" + ")" * depth).value == 1


class TestEvaluate:
    """Tests for evaluate() on trees."""

    def test_literal(self):
        assert evaluate(Literal("42")) == 42

    def test_idempotent(self):
        """Evaluating the same tree twice gives the same result."""
        tree = parse("(- 100 (* 3 (+ 1 2)) 1)").value
        assert evaluate(tree) == evaluate(tree) == 90

    def test_idempotent_errors(self):
        tree = parse("(/ 1 0)").value
        for _ in range(2):
            with pytest.raises(DivisionByZero):
                evaluate(tree)

    def test_invalid_number(self):
        with pytest.raises(InvalidNumber):
            evaluate(Literal("1.5"))

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(InvalidNumber):
            evaluate(Literal("١٢"))

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperator):
            evaluate(Sequence([Literal("^"), Literal("2")]))

    def test_operator_must_be_literal(self):
        with pytest.raises(UnknownOperator):
            evaluate(Sequence([Sequence([Literal("+")]), Literal("2")]))

    def test_empty_form(self):
        with pytest.raises(ArityError):
            evaluate(Sequence([]))

    def test_absent(self):
        with pytest.raises(InvalidNumber):
            evaluate(Absent)


class TestOperatorBuilders:
    """Tests for nary_fold, fold_without_identity and truncating_div."""

    def test_nary_fold_identity(self):
        add = nary_fold(0, lambda a, b: a + b)
        assert add(iter([])) == 0
        assert add(iter([4])) == 4
        assert add(iter([1, 2, 3])) == 6

    def test_fold_without_identity(self):
        sub = fold_without_identity(lambda a, b: a - b, "-")
        assert sub(iter([10, 3, 2])) == 5
        with pytest.raises(ArityError):
            sub(iter([]))

    def test_truncating_div(self):
        assert truncating_div(7, 2) == 3
        assert truncating_div(-7, 2) == -3
        assert truncating_div(-7, -2) == 3
        with pytest.raises(DivisionByZero):
            truncating_div(1, 0)

    def test_arithmetic_operators(self):
        assert set(ARITHMETIC_OPERATORS) == {"+", "-", "*", "/"}


class TestEvaluationResult:
    """Tests for the Evaluation result type."""

    def test_truthiness(self):
        assert Evaluation(value=0)
        assert not Evaluation(error=InvalidNumber("bad"))

    def test_zero_is_success(self):
        result = calculate("(+ )")
        assert result
        assert result.value == 0
        assert result.error is None
        assert result.kind is None
