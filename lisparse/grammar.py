"""
Grammar for fully-parenthesized prefix arithmetic.

    expr     := form | atom
    form     := "(" ws? operator (ws? expr)* ws? ")"
    operator := token
    atom     := token
    token    := one or more characters that are neither whitespace nor parens

A form parses to Sequence([operator, operand, ...]) and an atom to a
Literal. Tokens are deliberately loose: "12x" is a valid atom and "%" a
valid operator, leaving number syntax and operator names to the evaluator.
Tokens end at whitespace or a paren, so "(+(* 2 3)1)" needs no spaces.

    parse("(+ 1 (* 2 3))")
    # => Success(Sequence([Literal('+'), Literal('1'),
    #                      Sequence([Literal('*'), Literal('2'), Literal('3')])]),
    #            Source(''))
"""

import logging
from functools import lru_cache
from typing import Optional

from .matchers import (
    Forward, Matcher, char, discard, drop_all_but_last, flat_string,
    one_of, optional, repeat, repeat1, run, satisfy, seq, transform, whitespace,
)
from .values import Absent, ErrorKind, Failure, MatchOutcome, Sequence, Value

logger = logging.getLogger(__name__)


def _token_char(c: str) -> bool:
    return not c.isspace() and c not in "()"


def _form_value(value: Sequence) -> Value:
    """Reshape ( ws? operator operands ws? ) into [operator operand ...]."""
    _, _, operator, operands, _, _ = value.items
    if operands is Absent:
        return Sequence([operator])
    return Sequence((operator,) + operands.items)


@lru_cache(maxsize=None)
def expression_grammar() -> Matcher:
    """
    Build the expression matcher.

    Built once per process. The grammar is read-only after assembly, so
    the returned matcher can be shared freely.
    """
    expr = Forward("expr")

    ws = discard(repeat1(whitespace()))
    token = flat_string(repeat1(satisfy(_token_char, "token character")))
    operand = drop_all_but_last(seq(optional(ws), expr.matcher()))

    form = transform(
        seq(char("("), optional(ws), token, repeat(operand), optional(ws), char(")")),
        _form_value,
    )
    expr.bind(one_of(form, token))
    return expr.matcher()


@lru_cache(maxsize=None)
def line_grammar() -> Matcher:
    """An expression with optional surrounding whitespace."""
    ws = discard(repeat1(whitespace()))
    return transform(
        seq(optional(ws), expression_grammar(), optional(ws)),
        lambda value: value.items[1],
    )


def parse(text: str, matcher: Optional[Matcher] = None) -> MatchOutcome:
    """
    Parse one line completely.

    Args:
        text: The line to parse
        matcher: Grammar to use (default: line_grammar())

    Returns:
        The outcome of the match. A success that leaves input unconsumed
        is reported as a TRAILING_INPUT failure.
    """
    outcome = run(matcher or line_grammar(), text)
    if not outcome:
        logger.debug("parse failed for %r: %s", text, outcome.message)
        return outcome
    if not outcome.remainder.at_end():
        return Failure(
            ErrorKind.TRAILING_INPUT,
            f"unexpected trailing input {outcome.remainder.rest!r}",
        )
    return outcome
