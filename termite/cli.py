#!/usr/bin/env python3
"""
termite Command-Line Interface

Applies one rule to expressions, one top-down pass each.

Usage:
    termite -r "swap(pair(X, Y)) = pair(Y, X)" -e "foo(swap(pair(a, b)))"
    termite -f swap.rule -e "foo(swap(pair(a, b)))"
    termite -f swap.rule -t -e "foo(swap(pair(a, b)))"     # also print each rewrite
    termite -f swap.rule --show-redexes -e "swap(pair(a, b))"
    cat exprs.txt | termite -f swap.rule                   # filter mode

Filter mode reads one expression per line; blank lines and lines starting
with '#' are skipped.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from . import __version__
from .engine import find_redexes, format_path, load_rule, load_rule_from_file
from .errors import TermiteError
from .expr import Rule
from .parser import parse_expr

logger = logging.getLogger(__name__)

# Reported when an input is deeper than the interpreter's recursion limit
TOO_DEEP = "expression nested too deeply"


class RewriteRunner:
    """Applies a rule to expressions given as text and prints the results."""

    def __init__(self, rule: Rule, trace: bool = False, show_redexes: bool = False,
                 out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.rule = rule
        self.trace = trace
        self.show_redexes = show_redexes
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def process_line(self, line: str) -> Optional[List[str]]:
        """
        Rewrite the expression on one line.

        Returns the output lines, or None for blank and comment lines.

        Raises:
            TermiteError: If the line does not parse or the rule is
                malformed for this input
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        expr = parse_expr(line)

        if self.show_redexes:
            redexes = find_redexes(self.rule, expr)
            if not redexes:
                return ["(no redexes)"]
            return [f"{format_path(path)}: {bindings}" for path, bindings in redexes]

        if self.trace:
            result, trace = self.rule.apply_all(expr, trace=True)
            return [str(result)] + [f"  {step}" for step in trace]

        return [str(self.rule.apply_all(expr))]

    def _emit(self, line: str) -> int:
        try:
            output = self.process_line(line)
        except TermiteError as e:
            print(f"Error: {e}", file=self.err)
            return 1
        except RecursionError:
            print(f"Error: {TOO_DEEP}", file=self.err)
            return 1
        if output:
            for out_line in output:
                print(out_line, file=self.out)
        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Rewrite a single expression.

        Returns:
            Exit code (0 for success)
        """
        return self._emit(expr_str)

    def run_stream(self, lines: Iterable[str]) -> int:
        """
        Rewrite one expression per input line, stopping at the first error.

        Returns:
            Exit code (0 for success)
        """
        for lineno, line in enumerate(lines, 1):
            code = self._emit(line)
            if code:
                logger.debug("stopped at input line %d", lineno)
                return code
        return 0


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termite",
        description="termite - apply a term-rewriting rule in one top-down pass",
        epilog="Examples:\n"
               "  termite -r 'swap(pair(X, Y)) = pair(Y, X)' -e 'swap(pair(a, b))'\n"
               "  termite -f swap.rule -e 'foo(swap(pair(a, b)))'\n"
               "  cat exprs.txt | termite -f swap.rule   Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-r", "--rule",
        help="Rule text, e.g. 'f(X) = g(X)'"
    )
    source.add_argument(
        "-f", "--rule-file",
        help="Read the rule from a file"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Rewrite a single expression"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Print every rewritten redex after the result"
    )

    parser.add_argument(
        "--show-redexes",
        action="store_true",
        help="List every subtree the rule head matches instead of rewriting"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        if args.rule_file:
            rule = load_rule_from_file(Path(args.rule_file))
        else:
            rule = load_rule(args.rule)
    except (TermiteError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RecursionError:
        print(f"Error: {TOO_DEEP}", file=sys.stderr)
        return 1

    runner = RewriteRunner(rule, trace=args.trace, show_redexes=args.show_redexes)

    if args.expr is not None:
        return runner.run_expression(args.expr)

    if sys.stdin.isatty():
        parser.error("no expression given: use -e or pipe expressions on stdin")

    return runner.run_stream(sys.stdin)


if __name__ == "__main__":
    sys.exit(main())
