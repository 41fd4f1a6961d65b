"""
Conveniences around the core rewriter.

This module provides the expression builder E, traced rule application,
redex discovery and loading a rule from text or a file.

Expression Builder:
    from termite import E

    E("f(a, g(b))")                 # parse
    E.app("f", "a", E.app("g", "b"))  # build; strings become symbols
    x, y = E.syms("x", "y")

Tracing:
    rule = E.rule("swap(pair(X, Y)) = pair(Y, X)")
    result, trace = rule.apply_all(E("foo(swap(pair(a, b)))"), trace=True)
    print(trace)
    # Initial: foo(swap(pair(a, b)))
    #   1. 0: swap(pair(a, b)) -> pair(b, a)
    # Final: foo(pair(b, a))

Rule files:
    # swap.rule
    swap(pair(X, Y)) =
        pair(Y, X)

    rule = load_rule_from_file("swap.rule")
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .expr import Application, Expr, Rule, Symbol, app, subterms
from .parser import parse_expr, parse_rule
from .rewriter import Bindings, match, rewrite_pass

logger = logging.getLogger(__name__)

PathType = Tuple[int, ...]


# ============================================================
# Expression Builder
# ============================================================

class _ExprBuilder:
    """
    Expression builder for termite.

    Examples:
        from termite import E

        # Parse a string
        expr = E("pair(a, b)")

        # Build programmatically
        expr = E.app("pair", "a", "b")

        # Symbols
        a, b = E.syms("a", "b")
        expr = E.app("pair", a, E.app("f", b))

        # Rules
        rule = E.rule("swap(pair(X, Y)) = pair(Y, X)")
    """

    def __call__(self, s: str) -> Expr:
        """
        Parse an expression string.

        Examples:
            E("a") -> Symbol('a')
            E("f(a)") -> Application('f', (Symbol('a'),))
        """
        return parse_expr(s)

    def app(self, name: str, *args: Union[Expr, str]) -> Application:
        """
        Build an application. String arguments become Symbols.

        Examples:
            E.app("f", "a") -> f(a)
            E.app("nil") -> nil()
        """
        return app(name, *args)

    def sym(self, name: str) -> Symbol:
        """Create a symbol."""
        return Symbol(name)

    def syms(self, *names: str) -> Tuple[Symbol, ...]:
        """
        Create several symbols for unpacking.

        Example:
            x, y = E.syms("x", "y")
        """
        return tuple(Symbol(name) for name in names)

    def rule(self, s: str) -> Rule:
        """Parse a rule string such as ``f(X) = g(X)``."""
        return parse_rule(s)

    def __repr__(self) -> str:
        return "E (expression builder)"


# Singleton instance
E = _ExprBuilder()


# ============================================================
# Tracing
# ============================================================

def format_path(path: PathType) -> str:
    """Render a path of argument indices, e.g. (0, 1) -> "0.1"."""
    if not path:
        return "root"
    return ".".join(str(i) for i in path)


class RewriteStep:
    """A single redex rewritten during a pass."""

    def __init__(self, path: PathType, before: Expr, after: Expr, bindings: Bindings):
        self.path = path
        self.before = before
        self.after = after
        self.bindings = bindings

    def __repr__(self) -> str:
        return f"{format_path(self.path)}: {self.before} -> {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "path": list(self.path),
            "before": str(self.before),
            "after": str(self.after),
            "bindings": {name: str(value) for name, value in self.bindings.items()},
        }


class RewriteTrace:
    """
    Record of one apply_all pass.

    Steps are in the order the pass visited them: outermost first, then
    left to right through the arguments.

    Formatting:
        - Default repr / format("verbose"): multi-line with each step
        - format("compact"): single line
        - format("paths"): just the rewritten positions
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self, rule: Optional[Rule] = None):
        self.rule = rule
        self.steps: List[RewriteStep] = []
        self.initial: Optional[Expr] = None
        self.final: Optional[Expr] = None

    def add_step(self, step: RewriteStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace.

        Args:
            style: One of "verbose", "compact", "paths"

        Returns:
            Formatted string representation of the trace.
        """
        if style == "compact":
            return f"{self.initial} --[{len(self.steps)} rewrites]--> {self.final}"

        elif style == "paths":
            if not self.steps:
                return "(no redexes)"
            return ", ".join(format_path(step.path) for step in self.steps)

        elif style == "verbose":
            return repr(self)

        raise ValueError(f"Unknown trace style: {style}. "
                         f"Valid options: verbose, compact, paths")

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any rewriting was done."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "rule": str(self.rule) if self.rule is not None else None,
            "initial": str(self.initial),
            "final": str(self.final),
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }


def apply_with_trace(rule: Rule, expr: Expr) -> Tuple[Expr, RewriteTrace]:
    """
    Same pass as rewriter.apply_all, recording each rewritten redex.

    Returns:
        (result, trace)
    """
    trace = RewriteTrace(rule)
    trace.initial = expr

    def record(path: PathType, before: Expr, after: Expr, bindings: Bindings):
        trace.add_step(RewriteStep(path, before, after, bindings))

    trace.final = rewrite_pass(rule, expr, record)
    logger.debug("%s: %d rewrites", rule, len(trace))
    return trace.final, trace


# ============================================================
# Redex Discovery
# ============================================================

def find_redexes(rule: Rule, expr: Expr) -> List[Tuple[PathType, Bindings]]:
    """
    Find every subtree that the rule head matches.

    Unlike apply_all this also reports redexes nested inside other
    redexes. Useful for seeing why a pass did or did not rewrite
    something.

    Returns:
        List of (path, bindings) in pre-order

    Example:
        rule = E.rule("swap(pair(X, Y)) = pair(Y, X)")
        find_redexes(rule, E("swap(pair(swap(pair(a, b)), c))"))
        # => [((), {...}), ((0, 0), {...})]
    """
    found = []
    for path, node in subterms(expr):
        bindings = match(rule.head, node)
        if bindings:
            found.append((path, bindings))
    return found


# ============================================================
# Rule Loading
# ============================================================

def strip_comments(text: str) -> str:
    """Blank out comment lines, keeping character positions intact."""
    return "\n".join(
        " " * len(line) if line.lstrip().startswith("#") else line
        for line in text.split("\n")
    )


def load_rule(text: str) -> Rule:
    """
    Load a single rule from text.

    The rule may span several lines. Lines starting with '#' are comments.

    Raises:
        LexError, ParseError: If the text is not exactly one rule
    """
    rule = parse_rule(strip_comments(text))
    dangling = rule.dangling_variables
    if dangling:
        logger.info(
            "rule %s: body symbols %s are not bound by the head and will be kept as-is",
            rule, ", ".join(sorted(dangling)),
        )
    return rule


def load_rule_from_file(path: Union[str, Path]) -> Rule:
    """
    Load a single rule from a file.

    Raises:
        FileNotFoundError: If the file does not exist
        LexError, ParseError: If the file is not exactly one rule
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rule file not found: {path}")
    logger.debug("loading rule from %s", path)
    return load_rule(path.read_text())
