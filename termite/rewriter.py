"""
Core rewriter module: pattern matching, substitution and rule application.

    rule = parse_rule("swap(pair(X, Y)) = pair(Y, X)")

    match(rule.head, parse_expr("swap(pair(a, b))"))
    # => Bindings({'X': Symbol('a'), 'Y': Symbol('b')})

    apply_all(rule, parse_expr("foo(swap(pair(a, b)))"))
    # => foo(pair(b, a))

Matching is syntactic and positional. Every Symbol in a pattern is a
variable; a variable that occurs twice must match equal subtrees.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .errors import InvalidSubstitutionTarget
from .expr import Application, Expr, Rule, Symbol

logger = logging.getLogger(__name__)

# Internal bindings representation: variable name -> matched expression
BindingsType = Dict[str, Expr]


# ============================================================
# Bindings Class - Dict-like interface for match results
# ============================================================

class Bindings:
    """
    Read-only, dict-like view of a successful match.

        if bindings := match(pattern, expr):
            print(bindings["X"], bindings["Y"])
            print(bindings.get("Z", default=Symbol("z")))

    Bindings objects are truthy even when empty (a pattern with no
    variables still matched). Failed matches return NoMatch, which is falsy.

    Examples:
        bindings = Bindings({"X": Symbol("a")})
        bindings["X"]      # => Symbol('a')
        bindings.get("Y")  # => None
        "X" in bindings    # => True
        len(bindings)      # => 1
        dict(bindings)     # => {"X": Symbol('a')}
    """

    __slots__ = ('_dict',)

    def __init__(self, mapping: Optional[Mapping[str, Expr]] = None):
        self._dict = dict(mapping) if mapping else {}

    def __bool__(self) -> bool:
        return True

    def __getitem__(self, key: str) -> Expr:
        return self._dict[key]

    def get(self, key: str, default=None):
        """Get a bound value with optional default."""
        return self._dict.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._dict

    def keys(self):
        return self._dict.keys()

    def values(self):
        return self._dict.values()

    def items(self):
        return self._dict.items()

    def __iter__(self):
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __repr__(self) -> str:
        return f"Bindings({self._dict})"

    def __str__(self) -> str:
        inner = ", ".join(f"{name}: {value}" for name, value in sorted(self._dict.items()))
        return "{" + inner + "}"

    def __eq__(self, other):
        if isinstance(other, Bindings):
            return self._dict == other._dict
        if isinstance(other, dict):
            return self._dict == other
        return False

    def to_dict(self) -> Dict[str, Expr]:
        """Convert to a plain dictionary."""
        return self._dict.copy()


class _NoMatch:
    """
    Singleton representing a failed pattern match.

    NoMatch is falsy, allowing natural use in conditionals:

        if bindings := match(pattern, expr):
            # matched
        else:
            # NoMatch
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoMatch"

    def __getitem__(self, key: str):
        raise KeyError(f"NoMatch has no binding for '{key}'")

    def get(self, key: str, default=None):
        return default

    def __contains__(self, key: str) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter([])


# Singleton instance
NoMatch = _NoMatch()

MatchResult = Union[Bindings, _NoMatch]


def wrap_bindings(result: Optional[BindingsType]) -> MatchResult:
    """
    Convert internal bindings representation to Bindings or NoMatch.

    Args:
        result: A bindings dict, or None if the match failed

    Returns:
        Bindings object if matched, NoMatch if failed
    """
    if result is None:
        return NoMatch
    return Bindings(result)


# ============================================================
# Pattern Matching
# ============================================================

def match_into(pattern: Expr, value: Expr, bindings: BindingsType) -> bool:
    """
    Match pattern against value, extending bindings in place.

    The caller owns bindings and must discard it when this returns False;
    it may hold entries from the part of the pattern matched before the
    failure.
    """
    if isinstance(pattern, Symbol):
        bound = bindings.get(pattern.name)
        if bound is None:
            bindings[pattern.name] = value
            return True
        # Non-linear pattern: every occurrence must see the same subtree
        return bound == value

    if not isinstance(value, Application):
        return False
    if pattern.name != value.name or len(pattern.args) != len(value.args):
        return False
    for sub_pattern, sub_value in zip(pattern.args, value.args):
        if not match_into(sub_pattern, sub_value, bindings):
            return False
    return True


def match(pattern: Expr, value: Expr) -> MatchResult:
    """
    Match a pattern against an expression.

    Pattern rules:
        Symbol X          - binds X to any value; a repeated X must see
                            an equal value each time
        f(p1, ..., pn)    - matches f(v1, ..., vn) with the same name and
                            arity when every pi matches vi

    Args:
        pattern: The pattern (usually a rule head)
        value: The expression to match against

    Returns:
        Bindings on success, NoMatch on failure
    """
    bindings: BindingsType = {}
    return wrap_bindings(bindings if match_into(pattern, value, bindings) else None)


# ============================================================
# Substitution
# ============================================================

def substitute(bindings: Union[Bindings, Mapping[str, Expr]], expr: Expr) -> Expr:
    """
    Replace bound variables in expr.

    A Symbol is replaced by its binding. An Application keeps its shape,
    but its name is itself looked up: if bound to a Symbol the application
    is renamed, so a rule can rewrite function names.

    Args:
        bindings: Bindings from match(), or any name -> Expr mapping
        expr: Template expression (usually a rule body)

    Returns:
        The instantiated expression

    Raises:
        InvalidSubstitutionTarget: If a function name is bound to an
            Application
    """
    if isinstance(expr, Symbol):
        return bindings.get(expr.name, expr)

    name = expr.name
    bound: Any = bindings.get(name)
    if isinstance(bound, Symbol):
        name = bound.name
    elif bound is not None:
        raise InvalidSubstitutionTarget(expr.name, bound)

    return Application(name, tuple(substitute(bindings, arg) for arg in expr.args))


# ============================================================
# Rule Application
# ============================================================

# Called as on_rewrite(path, before, after, bindings) for each rewritten redex
RewriteCallback = Callable[[Tuple[int, ...], Expr, Expr, Bindings], None]


def rewrite_pass(rule: Rule, expr: Expr,
                 on_rewrite: Optional[RewriteCallback] = None,
                 path: Tuple[int, ...] = ()) -> Expr:
    """
    One top-down pass of rule over expr.

    path is the position of expr within the whole tree, as a tuple of
    argument indices; on_rewrite sees it for each redex it is told about.
    """
    bindings = match(rule.head, expr)
    if bindings:
        result = substitute(bindings, rule.body)
        logger.debug("rewrote %s -> %s", expr, result)
        if on_rewrite is not None:
            on_rewrite(path, expr, result, bindings)
        return result

    if isinstance(expr, Symbol):
        return expr
    return Application(
        expr.name,
        tuple(rewrite_pass(rule, arg, on_rewrite, path + (i,))
              for i, arg in enumerate(expr.args)),
    )


def apply_all(rule: Rule, expr: Expr) -> Expr:
    """
    Rewrite every outermost redex of rule in expr, in one pass.

    Strategy (top-down, not a fixpoint):
        1. If rule.head matches expr, return the instantiated body. The
           result is not visited again.
        2. Otherwise a Symbol is returned unchanged and an Application
           keeps its name while each argument is rewritten in order.

    Applying the rule again to the result may find redexes this pass
    created or carried into the result.

    Args:
        rule: The rule to apply
        expr: Expression to rewrite

    Returns:
        The rewritten expression (equal to expr if nothing matched)

    Raises:
        InvalidSubstitutionTarget: If the rule body renames a function
            with a variable bound to an Application
    """
    return rewrite_pass(rule, expr)
