"""
Expression data model for termite.

An expression is one of two immutable shapes:

    Symbol("a")                          a
    Application("f", (Symbol("a"),))     f(a)

Expressions compare structurally, hash, and render to a canonical text
form that the parser accepts back:

    str(Application("pair", (Symbol("b"), Symbol("a"))))  # => "pair(b, a)"
"""

from dataclasses import dataclass, field
from typing import Iterable, Set, Tuple, Union


def is_identifier_char(c: str) -> bool:
    """True for the ASCII characters an identifier may contain."""
    return c == "_" or ("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9")


def is_identifier_start(c: str) -> bool:
    """True for the ASCII characters an identifier may start with."""
    return is_identifier_char(c) and not ("0" <= c <= "9")


def _check_name(name: str) -> None:
    if not isinstance(name, str):
        raise TypeError(f"name must be a string, got {type(name).__name__}")
    if not name or not all(is_identifier_char(c) for c in name):
        raise ValueError(f"invalid name: {name!r}")


@dataclass(frozen=True)
class Symbol:
    """An atomic identifier. In a rule head it acts as a variable."""

    name: str

    def __post_init__(self):
        _check_name(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Application:
    """A named function or constructor applied to zero or more arguments."""

    name: str
    args: Tuple["Expr", ...] = field(default=())

    def __post_init__(self):
        _check_name(self.name)
        args = tuple(self.args)
        for arg in args:
            if not isinstance(arg, (Symbol, Application)):
                raise TypeError(
                    f"argument of {self.name} must be an expression, got {arg!r}"
                )
        # frozen, so bypass __setattr__ to store the normalized tuple
        object.__setattr__(self, "args", args)

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(arg) for arg in self.args)})"


Expr = Union[Symbol, Application]


@dataclass(frozen=True)
class Rule:
    """
    A single rewrite rule: head pattern and replacement body.

    Symbols in the head are variables. Body symbols that the head never
    binds are left as they are when the rule fires; see dangling_variables.

    Examples:
        rule = Rule.parse("swap(pair(X, Y)) = pair(Y, X)")
        rule.apply_all(E("swap(pair(a, b))"))  # => pair(b, a)
    """

    head: Expr
    body: Expr

    def __post_init__(self):
        for part in (self.head, self.body):
            if not isinstance(part, (Symbol, Application)):
                raise TypeError(f"rule parts must be expressions, got {part!r}")

    def __str__(self) -> str:
        return f"{self.head} = {self.body}"

    @property
    def variables(self) -> Set[str]:
        """Names the head binds when it matches."""
        return symbols(self.head)

    @property
    def dangling_variables(self) -> Set[str]:
        """Body symbols that no head variable can bind."""
        return symbols(self.body) - self.variables

    @classmethod
    def parse(cls, text: str) -> "Rule":
        """Parse a rule from text of the form ``pattern = body``."""
        from .parser import parse_rule
        return parse_rule(text)

    def apply_all(self, expr: Expr, trace: bool = False):
        """
        Rewrite expr in one top-down pass.

        Args:
            expr: Expression to rewrite
            trace: If True, return (result, RewriteTrace)

        Returns:
            The rewritten expression, or (expression, trace) if trace=True
        """
        if trace:
            from .engine import apply_with_trace
            return apply_with_trace(self, expr)
        from .rewriter import apply_all
        return apply_all(self, expr)


# ============================================================
# Helpers
# ============================================================

def format_expr(expr: Expr) -> str:
    """
    Render an expression in canonical text form.

    parse_expr reads the result back to an equal tree when every name is
    a valid identifier. Names starting with a digit, such as the 1 in
    Application("bar", (Symbol("1"),)), render but do not parse.
    """
    return str(expr)


def symbols(expr: Expr) -> Set[str]:
    """Names of all Symbol leaves in expr."""
    if isinstance(expr, Symbol):
        return {expr.name}
    found: Set[str] = set()
    for arg in expr.args:
        found |= symbols(arg)
    return found


def app(name: str, *args: Union[Expr, str]) -> Application:
    """Build an Application, turning plain strings into Symbols."""
    return Application(name, tuple(_coerce(a) for a in args))


def _coerce(value: Union[Expr, str]) -> Expr:
    if isinstance(value, str):
        return Symbol(value)
    return value


def subterms(expr: Expr, path: Tuple[int, ...] = ()) -> Iterable[Tuple[Tuple[int, ...], Expr]]:
    """Yield (path, subtree) for expr and every descendant, in pre-order."""
    yield path, expr
    if isinstance(expr, Application):
        for i, arg in enumerate(expr.args):
            yield from subterms(arg, path + (i,))
