#!/usr/bin/env python3
"""
lisparse Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes for
prefix arithmetic.

Usage:
    lisparse                          # Start REPL
    lisparse script.lisp              # Evaluate each line of a file
    lisparse -e "(+ 1 2)"             # Evaluate expression
    echo "(* 2 3)" | lisparse         # Filter mode

Script Format:
    # comments and blank lines are skipped
    (+ 1 2)
    (* 2 (- 10 4))

REPL Commands:
    :help              Show help
    :tree on|off       Toggle printing of the parsed tree
    :operators         List known operators
    :quit              Exit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .evaluator import ARITHMETIC_OPERATORS, OperatorTable, calculate
from .observability import setup_logging
from .values import format_value

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

logger = logging.getLogger(__name__)


class LisparseCompleter:
    """Tab completer for the REPL."""

    COMMANDS = [":help", ":quit", ":exit", ":q", ":tree", ":operators"]
    TREE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'LisparseREPL'):
        self.repl = repl
        self.matches = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> list:
        line = line.lstrip()

        if line.startswith(":tree "):
            return [t for t in self.TREE_OPTIONS if t.startswith(text)]

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        # Operator names after an opening paren
        if line.endswith("(" + text):
            return [op for op in sorted(self.repl.operators) if op.startswith(text)]

        return []


def count_parens(text: str) -> int:
    """Count unbalanced parentheses. Returns >0 if more open than close."""
    depth = 0
    for c in text:
        if c == '(':
            depth += 1
        elif c == ')':
            depth -= 1
    return depth


class LisparseREPL:
    """Interactive REPL for prefix arithmetic."""

    def __init__(self, operators: Optional[OperatorTable] = None):
        self.operators: OperatorTable = operators if operators is not None else ARITHMETIC_OPERATORS
        self.show_tree = False
        self.running = True
        self.multi_line_buffer = ""

        if HAS_READLINE:
            self.history_file = Path.home() / ".lisparse_history"
            try:
                readline.read_history_file(self.history_file)
            except OSError:
                pass
            readline.set_history_length(1000)

            self.completer = LisparseCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n()")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.debug("could not write history file: %s", e)

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd == "quit" or cmd == "exit" or cmd == "q":
            self.running = False
            return None

        elif cmd == "tree":
            if arg.lower() in ("on", "true", "1"):
                self.show_tree = True
            elif arg.lower() in ("off", "false", "0"):
                self.show_tree = False
            else:
                self.show_tree = not self.show_tree
            return f"Tree display {'enabled' if self.show_tree else 'disabled'}"

        elif cmd == "operators":
            return "Operators: " + " ".join(sorted(self.operators))

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """lisparse REPL Commands:
  :help              Show this help
  :tree on|off       Toggle printing of the parsed tree
  :operators         List known operators
  :quit              Exit

Syntax:
  42, -11                   Integer literal
  (op operand ...)          Apply op to operands, e.g. (+ 1 (* 2 3))
  (+ ) = 0, (* ) = 1        Identity for zero operands
"""

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        result = calculate(line, self.operators)
        if not result:
            if self.show_tree and result.tree is not None:
                return f"Error: {result.message}\ntree: {format_value(result.tree)}"
            return f"Error: {result.message}"

        output = str(result.value)
        if self.show_tree:
            return f"{output}\ntree: {format_value(result.tree)}"
        return output

    def run(self):
        """Run the REPL loop."""
        print("lisparse - prefix arithmetic")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                if self.multi_line_buffer:
                    prompt = "...... "
                else:
                    prompt = "lisp> "

                line = input(prompt)

                if self.multi_line_buffer:
                    self.multi_line_buffer += " " + line
                else:
                    self.multi_line_buffer = line

                # Keep reading while parens are open
                paren_count = count_parens(self.multi_line_buffer)
                if paren_count > 0:
                    continue

                complete_input = self.multi_line_buffer
                self.multi_line_buffer = ""

                result = self.process_line(complete_input)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                # Ctrl+C cancels pending multi-line input, else exits
                if self.multi_line_buffer:
                    print("\nInput cancelled")
                    self.multi_line_buffer = ""
                    continue
                print()
                break

        self.save_history()


class ScriptRunner:
    """Evaluates lines from files, arguments and stdin."""

    def __init__(self, operators: Optional[OperatorTable] = None):
        self.repl = LisparseREPL(operators)

    def run_script(self, path: Path, quiet: bool = False) -> int:
        """
        Run a script file, one expression per line.

        Args:
            path: Path to the script
            quiet: If True, don't print expression results

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        for lineno, line in enumerate(lines, 1):
            result = self.repl.process_line(line)
            if result is None:
                continue
            if result.startswith("Error"):
                print(f"{path}:{lineno}: {result}", file=sys.stderr)
                return 1
            if not quiet:
                print(result)

        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Evaluate a single expression.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(expr_str)
        if result:
            print(result)
            if result.startswith("Error"):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read expressions from stdin and evaluate them.

        Returns:
            Exit code (0 for success)
        """
        status = 0
        for line in sys.stdin:
            result = self.repl.process_line(line)
            if result:
                print(result)
                if result.startswith("Error"):
                    status = 1

        return status


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="lisparse",
        description="lisparse - prefix arithmetic on a parser-combinator engine",
        epilog="Examples:\n"
               "  lisparse                       Start REPL\n"
               "  lisparse script.lisp           Evaluate each line of a file\n"
               "  lisparse -e '(+ 1 2)'          Evaluate expression\n"
               "  echo '(* 2 3)' | lisparse      Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="File with one expression per line"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Evaluate a single expression"
    )

    parser.add_argument(
        "-t", "--tree",
        action="store_true",
        help="Print the parsed tree along with each result"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (suppress script results, report errors only)"
    )

    parser.add_argument(
        "--log-level",
        help="Logging level (default: $LISPARSE_LOG or WARNING)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Logging format (default: $LISPARSE_LOG_FORMAT or text)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_format)
    logger.debug("starting")

    runner = ScriptRunner()
    runner.repl.show_tree = args.tree

    if args.script:
        sys.exit(runner.run_script(Path(args.script), quiet=args.quiet))

    elif args.expr is not None:
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        sys.exit(runner.run_stdin())

    else:
        runner.repl.run()


if __name__ == "__main__":
    main()
