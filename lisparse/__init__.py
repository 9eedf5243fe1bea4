"""
lisparse - parser combinators and a prefix arithmetic evaluator

Quick Start:
    from lisparse import calculate

    calculate("(+ 1 (* 2 3))").value   # => 7
    calculate("(/ 5 0)").kind          # => ErrorKind.DIVISION_BY_ZERO

Building grammars:
    from lisparse import Forward, char, digit, flat_string, one_of, repeat1, run, seq

    number = flat_string(repeat1(digit()))
    expr = Forward("expr")
    group = seq(char("["), expr.matcher(), char("]"))
    expr.bind(one_of(group, number))

    run(expr.matcher(), "[[42]]")

Combinators:
    satisfy, digit, alphabetic, alphanumeric, whitespace, char, char_class
                        - single-character primitives
    seq, one_of         - sequence (all or nothing) and ordered choice
    repeat, repeat1     - zero-or-more / one-or-more
    optional            - zero-or-one
    flat_string, discard, drop_all_but_last, transform
                        - value transforms
    Forward             - forward reference for recursive grammars
"""

__version__ = "0.1.0"

# Value model
from .values import (
    Absent,
    ContractViolation,
    ErrorKind,
    Failure,
    GrammarNotDefined,
    LisparseError,
    Literal,
    MatchOutcome,
    Sequence,
    Source,
    Success,
    Value,
    format_value,
)

# Matchers and combinators
from .matchers import (
    Forward,
    Matcher,
    alphabetic,
    alphanumeric,
    char,
    char_class,
    digit,
    discard,
    drop_all_but_last,
    flat_string,
    one_of,
    optional,
    repeat,
    repeat1,
    run,
    satisfy,
    seq,
    transform,
    whitespace,
)

# Arithmetic grammar and evaluator
from .grammar import expression_grammar, line_grammar, parse
from .evaluator import (
    ARITHMETIC_OPERATORS,
    ArityError,
    DivisionByZero,
    Evaluation,
    EvaluationError,
    InvalidNumber,
    NestingTooDeep,
    UnknownOperator,
    calculate,
    evaluate,
    fold_without_identity,
    nary_fold,
    truncating_div,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Values
    "Absent",
    "Literal",
    "Sequence",
    "Value",
    "Source",
    "Success",
    "Failure",
    "MatchOutcome",
    "format_value",
    # Errors
    "ErrorKind",
    "LisparseError",
    "GrammarNotDefined",
    "ContractViolation",
    # Primitives
    "Matcher",
    "satisfy",
    "digit",
    "alphabetic",
    "alphanumeric",
    "whitespace",
    "char",
    "char_class",
    # Combinators
    "seq",
    "one_of",
    "repeat",
    "repeat1",
    "optional",
    "flat_string",
    "discard",
    "drop_all_but_last",
    "transform",
    "Forward",
    "run",
    # Grammar
    "expression_grammar",
    "line_grammar",
    "parse",
    # Evaluator
    "ARITHMETIC_OPERATORS",
    "nary_fold",
    "fold_without_identity",
    "truncating_div",
    "evaluate",
    "calculate",
    "Evaluation",
    "EvaluationError",
    "InvalidNumber",
    "NestingTooDeep",
    "DivisionByZero",
    "UnknownOperator",
    "ArityError",
]
