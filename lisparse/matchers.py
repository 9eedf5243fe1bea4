"""
Primitive matchers and combinators.

A matcher is any callable taking a Source and returning a MatchOutcome.
Builders in this module return closures, so grammars are assembled from
plain values:

    number = flat_string(repeat1(digit()))
    pair = seq(number, discard(char(",")), number)

    run(pair, "12,34")
    # => Success(Sequence([Literal('12'), Absent, Literal('34')]), Source(''))

Every matcher here keeps one contract: on failure nothing is consumed.
The caller still owns the Source it passed in, which is what makes
backtracking in one_of() safe without any rollback.

Recursive grammars go through a Forward handle:

    expr = Forward("expr")
    group = seq(char("("), expr.matcher(), char(")"))
    expr.bind(one_of(group, digit()))
"""

import logging
import re
from typing import Callable, List, Optional, Union

from .values import (
    Absent, ContractViolation, ErrorKind, Failure, GrammarNotDefined,
    Literal, MatchOutcome, Sequence, Source, Success, Value, as_source,
)

logger = logging.getLogger(__name__)

# Type aliases
Matcher = Callable[[Source], MatchOutcome]
Predicate = Callable[[str], bool]


def run(matcher: Matcher, text: Union[str, Source]) -> MatchOutcome:
    """Apply a matcher to a plain string (or an existing Source)."""
    return matcher(as_source(text))


# ============================================================
# Primitive Matchers
# ============================================================

def satisfy(predicate: Predicate, description: Optional[str] = None) -> Matcher:
    """
    Match exactly one character for which predicate holds.

    Args:
        predicate: Called with a single-character string
        description: What the character should be, used in failure messages

    Returns:
        A matcher yielding Literal(ch) on success. Fails with
        UNEXPECTED_END on empty input and UNEXPECTED_CHARACTER otherwise.
    """
    expected = f", expected {description}" if description else ""

    def match(source: Source) -> MatchOutcome:
        if source.at_end():
            return Failure(ErrorKind.UNEXPECTED_END, f"unexpected end of input{expected}")
        ch = source.peek()
        if predicate(ch):
            return Success(Literal(ch), source.advance(1))
        return Failure(ErrorKind.UNEXPECTED_CHARACTER, f"unexpected character {ch!r}{expected}")
    return match


def digit() -> Matcher:
    """Match one ASCII decimal digit."""
    return satisfy(lambda c: "0" <= c <= "9", "digit")


def alphabetic() -> Matcher:
    return satisfy(str.isalpha, "letter")


def alphanumeric() -> Matcher:
    return satisfy(str.isalnum, "letter or digit")


def whitespace() -> Matcher:
    return satisfy(str.isspace, "whitespace")


def char(expected: str) -> Matcher:
    """Match one exact character."""
    if len(expected) != 1:
        raise ValueError("char: expected a single character")
    return satisfy(lambda c: c == expected, repr(expected))


def char_class(pattern: str) -> Matcher:
    """
    Match one character against a regex character class body.

    Examples:
        char_class("a-z")     # lowercase ASCII letters
        char_class("+\\-*/")  # arithmetic operators
        char_class("^()\\s")  # anything but parens and whitespace
    """
    compiled = re.compile(f"[{pattern}]")
    return satisfy(lambda c: compiled.fullmatch(c) is not None, f"[{pattern}]")


# ============================================================
# Sequencing and Choice
# ============================================================

def seq(*matchers: Matcher) -> Matcher:
    """
    Apply matchers in order, threading each remainder into the next.

    All or nothing: the first failure is returned unchanged and no partial
    Sequence escapes. On success the value is a Sequence with one child per
    matcher.
    """
    if not matchers:
        raise ValueError("seq: at least one matcher is required")

    def match(source: Source) -> MatchOutcome:
        values: List[Value] = []
        current = source
        for m in matchers:
            outcome = m(current)
            if not outcome:
                return outcome
            values.append(outcome.value)
            current = outcome.remainder
        return Success(Sequence(values), current)
    return match


def one_of(*matchers: Matcher) -> Matcher:
    """
    Try matchers in order against the same input; first success wins.

    Listing order is the tie-break when several alternatives could match.
    If every alternative fails, the failure lists each alternative's message
    in order.
    """
    if not matchers:
        raise ValueError("one_of: at least one matcher is required")

    def match(source: Source) -> MatchOutcome:
        messages = []
        for m in matchers:
            outcome = m(source)
            if outcome:
                return outcome
            messages.append(outcome.message)
        return Failure(
            ErrorKind.ALTERNATIVES_EXHAUSTED,
            "no alternative matched: " + "; ".join(messages),
        )
    return match


# ============================================================
# Repetition and Optionality
# ============================================================

def repeat(matcher: Matcher) -> Matcher:
    """
    Zero or more occurrences. Never fails.

    Zero occurrences yield Absent with the input untouched; otherwise a
    Sequence of the collected values. An inner success that consumes
    nothing ends the loop, since repeating it could never make progress.
    """
    def match(source: Source) -> MatchOutcome:
        values: List[Value] = []
        current = source
        while True:
            outcome = matcher(current)
            if not outcome or outcome.remainder.offset == current.offset:
                break
            values.append(outcome.value)
            current = outcome.remainder
        if not values:
            return Success(Absent, source)
        return Success(Sequence(values), current)
    return match


def repeat1(matcher: Matcher) -> Matcher:
    """
    One or more occurrences.

    Fails exactly when repeat(matcher) would yield Absent, including an
    inner success that consumes nothing.
    """
    many = repeat(matcher)

    def match(source: Source) -> MatchOutcome:
        first = matcher(source)
        if not first:
            return Failure(
                ErrorKind.EXPECTED_AT_LEAST_ONE,
                f"expected at least one value ({first.message})",
            )
        if first.remainder.offset == source.offset:
            return Failure(ErrorKind.EXPECTED_AT_LEAST_ONE, "expected at least one value")
        rest = many(first.remainder)
        if rest.value is Absent:
            return Success(Sequence([first.value]), first.remainder)
        return Success(Sequence((first.value,) + rest.value.items), rest.remainder)
    return match


def optional(matcher: Matcher) -> Matcher:
    """The inner success unchanged, or Absent with the input untouched."""
    def match(source: Source) -> MatchOutcome:
        outcome = matcher(source)
        if outcome:
            return outcome
        return Success(Absent, source)
    return match


# ============================================================
# Value Transforms
# ============================================================

def flat_string(matcher: Matcher) -> Matcher:
    """
    Join a Sequence of single-character Literals into one Literal.

    Absent and a lone Literal pass through unchanged. Any other child
    shape raises ContractViolation: that is a grammar bug, not bad input.
    """
    def match(source: Source) -> MatchOutcome:
        outcome = matcher(source)
        if not outcome or not isinstance(outcome.value, Sequence):
            return outcome
        chars = []
        for child in outcome.value:
            if not isinstance(child, Literal) or len(child.text) != 1:
                raise ContractViolation(
                    f"flat_string: expected single-character literals, got {child!r}"
                )
            chars.append(child.text)
        return Success(Literal("".join(chars)), outcome.remainder)
    return match


def discard(matcher: Matcher) -> Matcher:
    """Require the match but replace its value with Absent."""
    def match(source: Source) -> MatchOutcome:
        outcome = matcher(source)
        if not outcome:
            return outcome
        return Success(Absent, outcome.remainder)
    return match


def drop_all_but_last(matcher: Matcher) -> Matcher:
    """Keep only the final child of a successful Sequence."""
    def match(source: Source) -> MatchOutcome:
        outcome = matcher(source)
        if not outcome:
            return outcome
        value = outcome.value
        if not isinstance(value, Sequence) or not value.items:
            raise ContractViolation(
                f"drop_all_but_last: expected a non-empty sequence, got {value!r}"
            )
        return Success(value.items[-1], outcome.remainder)
    return match


def transform(matcher: Matcher, function: Callable[[Value], Value]) -> Matcher:
    """Apply function to the value of a successful match."""
    def match(source: Source) -> MatchOutcome:
        outcome = matcher(source)
        if not outcome:
            return outcome
        return Success(function(outcome.value), outcome.remainder)
    return match


# ============================================================
# Forward References
# ============================================================

class Forward:
    """
    Handle for a matcher whose definition is supplied later.

    matcher() returns a delegating matcher that looks up the handle's
    current definition on every call, so it can be embedded in a grammar
    before that grammar exists. Any number of delegating matchers may be
    taken from one handle; they all see the same definition.

    Precondition: bind() happens during grammar assembly, before any
    parsing. Re-binding once parsing has started is not supported and is
    not checked.

    Examples:
        expr = Forward("expr")
        nested = seq(char("["), expr.matcher(), char("]"))
        expr.bind(one_of(nested, digit()))

        run(expr.matcher(), "[[7]]")   # succeeds
    """

    __slots__ = ('name', '_definition')

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._definition: Optional[Matcher] = None

    @property
    def bound(self) -> bool:
        return self._definition is not None

    def bind(self, definition: Matcher) -> 'Forward':
        """Install (or replace) the definition. Returns self for chaining."""
        logger.debug("binding forward reference %s", self.name or "<anonymous>")
        self._definition = definition
        return self

    def matcher(self) -> Matcher:
        """Return a matcher delegating to whatever definition is bound."""
        def delegate(source: Source) -> MatchOutcome:
            definition = self._definition
            if definition is None:
                raise GrammarNotDefined(
                    f"grammar {self.name or '<anonymous>'} not yet defined"
                )
            return definition(source)
        return delegate

    def __repr__(self) -> str:
        state = "bound" if self.bound else "unbound"
        return f"Forward({self.name!r}, {state})"
