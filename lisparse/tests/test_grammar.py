"""Tests for the prefix arithmetic grammar."""

import pytest
from lisparse import (
    ErrorKind, Literal, Sequence, expression_grammar, format_value, parse, run,
)


def form(*items):
    return Sequence([Literal(i) if isinstance(i, str) else i for i in items])


class TestParse:
    """Tests for parse()."""

    def test_atom(self):
        outcome = parse("-11")
        assert outcome.value == Literal("-11")
        assert outcome.remainder.at_end()

    def test_simple_form(self):
        assert parse("(+ 1 2)").value == form("+", "1", "2")

    def test_empty_form(self):
        """Forms without operands keep only the operator."""
        assert parse("(+ )").value == form("+")
        assert parse("(*)").value == form("*")

    def test_nested(self):
        outcome = parse("(+ 1 (* 2 3))")
        assert outcome.value == form("+", "1", form("*", "2", "3"))

    def test_whitespace(self):
        """Extra whitespace around and inside forms is allowed."""
        assert parse("  ( -   5\t2 )  ").value == form("-", "5", "2")

    def test_multi_digit_operator_token(self):
        """Operators are whole tokens; the evaluator decides if they are known."""
        assert parse("(mod 7 2)").value == form("mod", "7", "2")

    def test_trailing_input(self):
        outcome = parse("(+ 1 2) 3")
        assert not outcome
        assert outcome.kind == ErrorKind.TRAILING_INPUT
        assert "3" in outcome.message

    def test_unclosed(self):
        outcome = parse("(+ 1 2")
        assert not outcome
        assert outcome.kind == ErrorKind.ALTERNATIVES_EXHAUSTED

    def test_empty_line(self):
        assert not parse("")
        assert not parse("   ")

    def test_forms_need_no_leading_space(self):
        """A parenthesized operand may follow the previous token directly."""
        assert parse("(+ 1(* 2 3))").value == form("+", "1", form("*", "2", "3"))
        assert parse("(+(* 2 3) 1)").value == form("+", form("*", "2", "3"), "1")
        assert parse("(+ (* 2 3)(+ 1 1))").value == form(
            "+", form("*", "2", "3"), form("+", "1", "1"))

    def test_adjacent_atoms_are_one_token(self):
        assert parse("(+ 12)").value == form("+", "12")

    def test_deterministic(self):
        assert parse("(+ 1") == parse("(+ 1")

    def test_format(self):
        assert format_value(parse("(+ 1 (* 2 3))").value) == "[+ 1 [* 2 3]]"


class TestExpressionGrammar:
    """Tests for the shared expression matcher."""

    def test_cached(self):
        """The grammar is assembled once."""
        assert expression_grammar() is expression_grammar()

    def test_leaves_remainder(self):
        """The bare expression matcher stops after one expression."""
        outcome = run(expression_grammar(), "(+ 1) tail")
        assert outcome.value == form("+", "1")
        assert outcome.remainder == " tail"

    @pytest.mark.parametrize("text", ["(", ")", "()"])
    def test_malformed(self, text):
        assert not run(expression_grammar(), text)
