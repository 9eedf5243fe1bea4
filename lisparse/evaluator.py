"""
Evaluator for prefix arithmetic trees.

Consumes the Value trees produced by lisparse.grammar:

    Literal("-11")                          -> -11
    Sequence([Literal("+"), Literal("1"),
              Literal("2")])                -> 3

Operators are looked up in a table mapping names to handlers, in the
spirit of a prelude: each handler receives the operands as a lazy
iterator of ints and returns an int.

    ARITHMETIC_OPERATORS = {
        "+": nary_fold(0, lambda a, b: a + b),
        "-": fold_without_identity(lambda a, b: a - b, "-"),
        ...
    }

    my_ops = {**ARITHMETIC_OPERATORS, "max": fold_without_identity(max, "max")}
    evaluate(tree, operators=my_ops)

evaluate() raises EvaluationError subclasses. calculate() is the
parse-and-evaluate boundary and never raises for malformed input; it
returns an Evaluation instead.
"""

import logging
import re
from typing import Callable, Dict, Iterator, Optional, Union

from .grammar import parse
from .values import (
    ErrorKind, Failure, LisparseError, Literal, Sequence, Value,
    format_value,
)

logger = logging.getLogger(__name__)

# Operator handler: receives operands lazily, returns the result
OperatorHandler = Callable[[Iterator[int]], int]
OperatorTable = Dict[str, OperatorHandler]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_MISSING = object()


# ============================================================
# Evaluation Errors
# ============================================================

class EvaluationError(LisparseError):
    """Base class for errors found while evaluating a tree."""


class InvalidNumber(EvaluationError):
    kind = ErrorKind.INVALID_NUMBER


class DivisionByZero(EvaluationError):
    kind = ErrorKind.DIVISION_BY_ZERO


class UnknownOperator(EvaluationError):
    kind = ErrorKind.UNKNOWN_OPERATOR


class ArityError(EvaluationError):
    kind = ErrorKind.ARITY_ERROR


class NestingTooDeep(EvaluationError):
    """The input nests deeper than the interpreter stack allows."""
    kind = ErrorKind.NESTING_TOO_DEEP


# ============================================================
# Operator Builders
# ============================================================

def nary_fold(identity: int, binary_op: Callable[[int, int], int]) -> OperatorHandler:
    """Create a left fold that returns identity for zero operands.

    Examples:
        nary_fold(0, lambda a, b: a + b)  # (+) = 0, (+ x) = x, (+ x y z) = x+y+z
        nary_fold(1, lambda a, b: a * b)  # (*) = 1, (* x) = x, (* x y z) = x*y*z
    """
    def handler(operands: Iterator[int]) -> int:
        result = identity
        for operand in operands:
            result = binary_op(result, operand)
        return result
    return handler


def fold_without_identity(binary_op: Callable[[int, int], int], name: str) -> OperatorHandler:
    """Create a left fold seeded by its first operand.

    Zero operands is an ArityError since there is no identity to return.
    """
    def handler(operands: Iterator[int]) -> int:
        result = next(operands, _MISSING)
        if result is _MISSING:
            raise ArityError(f"operator {name!r} needs at least one operand")
        for operand in operands:
            result = binary_op(result, operand)
        return result
    return handler


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (7 / -2 = -3)."""
    if b == 0:
        raise DivisionByZero(f"division of {a} by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


ARITHMETIC_OPERATORS: OperatorTable = {
    "+": nary_fold(0, lambda a, b: a + b),
    "*": nary_fold(1, lambda a, b: a * b),
    "-": fold_without_identity(lambda a, b: a - b, "-"),
    "/": fold_without_identity(truncating_div, "/"),
}


# ============================================================
# Evaluation
# ============================================================

def parse_integer(text: str) -> int:
    """Parse a base-10 integer with an optional sign."""
    if not _INTEGER.fullmatch(text):
        raise InvalidNumber(f"invalid number {text!r}")
    return int(text)


def evaluate(value: Value, operators: Optional[OperatorTable] = None) -> int:
    """
    Compute the integer value of a tree.

    Args:
        value: A Literal number or a Sequence([operator, operand, ...])
        operators: Operator table (default: ARITHMETIC_OPERATORS)

    Returns:
        The integer result

    Raises:
        InvalidNumber: A leaf is not a base-10 integer
        UnknownOperator: The operator is not in the table
        ArityError: An operator got a number of operands it cannot handle
        DivisionByZero: A divisor evaluated to zero
    """
    table = operators if operators is not None else ARITHMETIC_OPERATORS

    if isinstance(value, Literal):
        return parse_integer(value.text)

    if isinstance(value, Sequence):
        if not value.items:
            raise ArityError("empty form has no operator")
        operator = value.items[0]
        if not isinstance(operator, Literal):
            raise UnknownOperator(f"operator must be a name, got {format_value(operator)}")
        handler = table.get(operator.text)
        if handler is None:
            raise UnknownOperator(f"unknown operator {operator.text!r}")
        operands = value.items[1:]
        logger.debug("evaluating %s with %d operand(s)", operator.text, len(operands))
        return handler(evaluate(operand, table) for operand in operands)

    raise InvalidNumber("missing value")


class Evaluation:
    """
    Result of calculate(): a value or an error, never both.

    Evaluations are truthy on success:

        if result := calculate("(+ 1 2)"):
            print(result.value)        # 3
        else:
            print(result.kind, result.message)

    Attributes:
        value: The integer result (None on error)
        tree: The parsed tree (None if parsing failed)
        error: A parse Failure or an EvaluationError (None on success)
    """

    __slots__ = ('value', 'tree', 'error')

    def __init__(self, value: Optional[int] = None, tree: Optional[Value] = None,
                 error: Union[Failure, EvaluationError, None] = None):
        self.value = value
        self.tree = tree
        self.error = error

    def __bool__(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    def __eq__(self, other):
        if isinstance(other, Evaluation):
            return (self.value == other.value and self.tree == other.tree
                    and self.kind == other.kind and self.message == other.message)
        return NotImplemented

    def __repr__(self) -> str:
        if self.error is None:
            return f"Evaluation({self.value})"
        return f"Evaluation(error={self.kind.value}: {self.message!r})"


def calculate(text: str, operators: Optional[OperatorTable] = None) -> Evaluation:
    """
    Parse a line and evaluate it.

    Parsing and evaluation both recurse once per nesting level; input
    nested deeper than the interpreter stack allows is reported as
    NESTING_TOO_DEEP.
    """
    try:
        outcome = parse(text)
    except RecursionError:
        return Evaluation(error=NestingTooDeep("expression nested too deeply to parse"))
    if not outcome:
        return Evaluation(error=outcome)
    try:
        return Evaluation(value=evaluate(outcome.value, operators), tree=outcome.value)
    except RecursionError:
        return Evaluation(
            tree=outcome.value,
            error=NestingTooDeep("expression nested too deeply to evaluate"),
        )
    except EvaluationError as e:
        logger.debug("evaluation of %r failed: %s", text, e.message)
        return Evaluation(tree=outcome.value, error=e)
