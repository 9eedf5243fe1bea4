"""
Value and outcome model for lisparse matchers.

A matcher takes a Source (an immutable cursor into one input string) and
returns a MatchOutcome: either Success (a Value plus the unconsumed
remainder) or Failure (an error kind plus a message, nothing else).

Values:
    Literal("12")                     - a contiguous run of matched text
    Sequence((Literal("("), ...))     - ordered children, in match order
    Absent                            - "matched nothing" (not a failure)

Success is truthy and Failure is falsy, so callers can write

    if outcome := matcher(source):
        use(outcome.value, outcome.remainder)
"""

from enum import Enum
from typing import Iterable, Optional, Tuple, Union


# ============================================================
# Error kinds and exceptions
# ============================================================

class ErrorKind(str, Enum):
    """Every way a match or an evaluation can go wrong."""
    UNEXPECTED_END = "unexpected_end"
    UNEXPECTED_CHARACTER = "unexpected_character"
    ALTERNATIVES_EXHAUSTED = "alternatives_exhausted"
    EXPECTED_AT_LEAST_ONE = "expected_at_least_one"
    GRAMMAR_NOT_YET_DEFINED = "grammar_not_yet_defined"
    TRAILING_INPUT = "trailing_input"
    INVALID_NUMBER = "invalid_number"
    DIVISION_BY_ZERO = "division_by_zero"
    UNKNOWN_OPERATOR = "unknown_operator"
    ARITY_ERROR = "arity_error"
    NESTING_TOO_DEEP = "nesting_too_deep"


class LisparseError(Exception):
    """Base class for errors raised (rather than returned) by lisparse."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GrammarNotDefined(LisparseError):
    """A Forward matcher was invoked before its definition was bound."""
    kind = ErrorKind.GRAMMAR_NOT_YET_DEFINED


class ContractViolation(LisparseError):
    """A transform received a value shape it cannot handle."""


# ============================================================
# Source - an immutable suffix view of the input
# ============================================================

class Source:
    """
    Cursor over an input string.

    A Source never copies the text; advancing returns a new cursor over
    the same string. Two Sources are equal when they view the same text
    at the same offset. A Source also compares equal to a plain string
    holding exactly its unconsumed suffix, which keeps tests readable:

        Source("abc").advance(1) == "bc"    # => True

    The hash is that of the unconsumed suffix, so a Source and its equal
    string land in the same set or dict slot.
    """

    __slots__ = ('text', 'offset')

    def __init__(self, text: str, offset: int = 0):
        self.text = text
        self.offset = offset

    @property
    def rest(self) -> str:
        """The unconsumed suffix."""
        return self.text[self.offset:]

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self) -> str:
        """Return the next character. Callers check at_end() first."""
        return self.text[self.offset]

    def advance(self, count: int = 1) -> 'Source':
        return Source(self.text, min(self.offset + count, len(self.text)))

    def __len__(self) -> int:
        return len(self.text) - self.offset

    def __eq__(self, other):
        if isinstance(other, Source):
            return self.text == other.text and self.offset == other.offset
        if isinstance(other, str):
            return self.rest == other
        return NotImplemented

    def __hash__(self):
        return hash(self.rest)

    def __repr__(self) -> str:
        return f"Source({self.rest!r})"


def as_source(text: Union[str, Source]) -> Source:
    """Wrap a plain string in a Source; pass Sources through unchanged."""
    if isinstance(text, Source):
        return text
    return Source(text)


# ============================================================
# Values
# ============================================================

class Literal:
    """A contiguous run of matched text."""

    __slots__ = ('text',)

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other):
        if isinstance(other, Literal):
            return self.text == other.text
        return NotImplemented

    def __hash__(self):
        return hash(('Literal', self.text))

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


class Sequence:
    """Ordered child values, in the order they were matched."""

    __slots__ = ('items',)

    def __init__(self, items: Iterable['Value']):
        self.items: Tuple['Value', ...] = tuple(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return self.items == other.items
        return NotImplemented

    def __hash__(self):
        return hash(('Sequence', self.items))

    def __repr__(self) -> str:
        return f"Sequence({list(self.items)!r})"


class _Absent:
    """
    Singleton marking a successful match of nothing.

    Produced by repeat() on zero occurrences, optional() on a failed inner
    match and discard() always. Absent is falsy so it reads naturally in
    conditionals, but it is a Value, never a Failure.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Absent"


# Singleton instance
Absent = _Absent()

Value = Union[Literal, Sequence, _Absent]


# ============================================================
# Outcomes
# ============================================================

class Success:
    """A matched value plus the unconsumed remainder. Always truthy."""

    __slots__ = ('value', 'remainder')

    def __init__(self, value: Value, remainder: Source):
        self.value = value
        self.remainder = remainder

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other):
        if isinstance(other, Success):
            return self.value == other.value and self.remainder == other.remainder
        return NotImplemented

    def __hash__(self):
        return hash((self.value, self.remainder))

    def __repr__(self) -> str:
        return f"Success({self.value!r}, {self.remainder!r})"


class Failure:
    """
    What a matcher expected and did not find. Always falsy.

    A Failure deliberately carries no remainder and no partial value: the
    caller still holds the Source it passed in, untouched.
    """

    __slots__ = ('kind', 'message')

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other):
        if isinstance(other, Failure):
            return self.kind == other.kind and self.message == other.message
        return NotImplemented

    def __hash__(self):
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"Failure({self.kind.value}, {self.message!r})"


MatchOutcome = Union[Success, Failure]


# ============================================================
# Display
# ============================================================

def format_value(value: Value) -> str:
    """
    Render a value tree compactly.

    Examples:
        Literal("+")                          -> +
        Sequence([Literal("+"), Literal("1")]) -> [+ 1]
        Absent                                -> _
    """
    if isinstance(value, Literal):
        return value.text
    if isinstance(value, Sequence):
        return "[" + " ".join(format_value(item) for item in value) + "]"
    return "_"
