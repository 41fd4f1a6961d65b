"""
termite - a minimal term-rewriting engine

Expressions are trees of symbols and named applications. A rule pairs a
head pattern with a replacement body and is applied in one top-down pass.

Quick Start:
    from termite import E

    rule = E.rule("swap(pair(X, Y)) = pair(Y, X)")
    rule.apply_all(E("foo(swap(pair(a, b)))"))  # => foo(pair(b, a))

Syntax:
    a                   - symbol (a variable when it appears in a rule head)
    f(a, g(b))          - application; f() has no arguments
    head = body         - rule

Matching:
    Every symbol in a head binds whatever it meets; a symbol used twice
    must meet equal subtrees. Applications match by name and arity.
    A head variable in function-name position of the body renames:

        call(F, X) = F(X)     turns call(inc, n) into inc(n)

Rewriting:
    The outermost match on each path is replaced and not revisited.
    Apply the rule again to rewrite what the first pass exposed.
"""

__version__ = "0.1.0"

# Expression model
from .expr import (
    Symbol,
    Application,
    Expr,
    Rule,
    format_expr,
    symbols,
    subterms,
)

# Errors
from .errors import (
    TermiteError,
    LexError,
    UnexpectedCharacter,
    ParseError,
    UnexpectedToken,
    UnexpectedEndOfInput,
    InvalidSubstitutionTarget,
)

# Lexer and parser
from .lexer import Token, TokenKind, tokenize
from .parser import Parser, parse_expr, parse_rule

# Core rewriter components
from .rewriter import (
    match,
    substitute,
    apply_all,
    rewrite_pass,
    Bindings,
    NoMatch,
    wrap_bindings,
)

# Engine conveniences
from .engine import (
    E,
    RewriteStep,
    RewriteTrace,
    apply_with_trace,
    find_redexes,
    format_path,
    load_rule,
    load_rule_from_file,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Model
    "Symbol",
    "Application",
    "Expr",
    "Rule",
    "format_expr",
    "symbols",
    "subterms",
    # Errors
    "TermiteError",
    "LexError",
    "UnexpectedCharacter",
    "ParseError",
    "UnexpectedToken",
    "UnexpectedEndOfInput",
    "InvalidSubstitutionTarget",
    # Text
    "Token",
    "TokenKind",
    "tokenize",
    "Parser",
    "parse_expr",
    "parse_rule",
    # Core
    "match",
    "substitute",
    "apply_all",
    "rewrite_pass",
    "Bindings",
    "NoMatch",
    "wrap_bindings",
    # Engine
    "E",
    "RewriteStep",
    "RewriteTrace",
    "apply_with_trace",
    "find_redexes",
    "format_path",
    "load_rule",
    "load_rule_from_file",
]
