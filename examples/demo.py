#!/usr/bin/env python3
"""
lisparse Feature Demonstration

Builds a few grammars from combinators, then runs the prefix arithmetic
evaluator.
"""

from lisparse import (
    ARITHMETIC_OPERATORS, ContractViolation, Forward,
    calculate, char, char_class, digit, discard, drop_all_but_last,
    flat_string, fold_without_identity, format_value, one_of, optional,
    repeat, repeat1, run, seq,
)


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def show(label, outcome):
    if outcome:
        print(f"  {label:<24} => {format_value(outcome.value)}  rest={outcome.remainder.rest!r}")
    else:
        print(f"  {label:<24} => failed: {outcome.message}")


def demo_tokens():
    """Assemble tokens from single characters."""
    section("Tokens")

    word = flat_string(repeat(char_class("a-z")))
    number = flat_string(repeat1(digit()))

    show('word on "foobar123"', run(word, "foobar123"))
    show('number on "2024!"', run(number, "2024!"))
    show('number on "x"', run(number, "x"))


def demo_separated_list():
    """A comma-separated list keeping only the items."""
    section("Separated List")

    number = flat_string(repeat1(digit()))
    rest = repeat(drop_all_but_last(seq(char(","), number)))
    numbers = seq(number, rest)

    show('"1,22,333;"', run(numbers, "1,22,333;"))
    show('"1,"', run(numbers, "1,"))


def demo_choice_order():
    """Earlier alternatives win."""
    section("Ordered Choice")

    short = char("a")
    greedy = flat_string(repeat1(char("a")))

    show("short first", run(one_of(short, greedy), "aaa"))
    show("greedy first", run(one_of(greedy, short), "aaa"))


def demo_recursion():
    """A recursive grammar through a Forward handle."""
    section("Recursive Grammar")

    expr = Forward("expr")
    group = seq(discard(char("[")), expr.matcher(), discard(char("]")))
    expr.bind(one_of(group, digit()))

    for text in ["7", "[[7]]", "[[7]"]:
        show(repr(text), run(expr.matcher(), text))

    signed = flat_string(seq(optional(char("-")), digit()))
    try:
        run(signed, "5")
    except ContractViolation as e:
        print(f"  flat_string over Absent child raises: {type(e).__name__}")


def demo_calculator():
    """Evaluate prefix arithmetic."""
    section("Calculator")

    examples = [
        "(+ 1 2)",
        "(+ )",
        "(* )",
        "(- 5 2 1)",
        "(/ 10 2)",
        "-11",
        "(+ 1 (* 2 3))",
        "(/ 5 0)",
        "(- )",
        "(% 1 2)",
        "(+ 1 2",
    ]

    for text in examples:
        result = calculate(text)
        if result:
            print(f"  {text:<16} => {result.value}")
        else:
            print(f"  {text:<16} => {result.kind.value}: {result.message}")

    ops = {**ARITHMETIC_OPERATORS, "max": fold_without_identity(max, "max")}
    print(f"  {'(max 3 9 4)':<16} => {calculate('(max 3 9 4)', ops).value}  (custom operator)")


def main():
    """Run all demonstrations."""
    print("lisparse - parser combinators and prefix arithmetic")
    print("Feature Demonstration")

    demo_tokens()
    demo_separated_list()
    demo_choice_order()
    demo_recursion()
    demo_calculator()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
