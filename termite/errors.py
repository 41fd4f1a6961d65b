"""
Exception types for termite.

Every error raised by the library derives from TermiteError, which is a
ValueError so callers that only care about "bad input" can catch that.

    TermiteError
    ├── LexError
    │   └── UnexpectedCharacter
    ├── ParseError
    │   ├── UnexpectedToken
    │   └── UnexpectedEndOfInput
    └── InvalidSubstitutionTarget

A failed pattern match is not an error: match() returns NoMatch.
"""

from typing import Any


class TermiteError(ValueError):
    """Base class for all termite errors."""


# ============================================================
# Lexing
# ============================================================

class LexError(TermiteError):
    """Raised when the source text cannot be tokenized."""


class UnexpectedCharacter(LexError):
    """A character that starts no token."""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"unexpected character {char!r} at position {position}")


# ============================================================
# Parsing
# ============================================================

class ParseError(TermiteError):
    """Raised when the token stream does not follow the grammar."""


class UnexpectedToken(ParseError):
    """
    A token other than the one the grammar requires.

    Attributes:
        expected: Human readable description of what was required
        found: The offending Token
    """

    def __init__(self, expected: str, found: Any):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected}, found {found.text!r} at position {found.position}"
        )


class UnexpectedEndOfInput(ParseError):
    """The token stream ended in the middle of a construct."""

    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"unexpected end of input, expected {expected}")


# ============================================================
# Substitution
# ============================================================

class InvalidSubstitutionTarget(TermiteError):
    """
    A variable in function-name position is bound to a non-Symbol.

    Only a Symbol can rename an application, so a binding such as
    F -> g(a) used in F(x) has no meaning. This aborts the rewrite.
    """

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value
        super().__init__(
            f"cannot use {value} as a function name: "
            f"variable {name!r} must be bound to a symbol"
        )
