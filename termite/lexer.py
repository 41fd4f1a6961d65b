"""
Lexer for the termite expression language.

Turns source text into a lazy stream of tokens:

    list(tokenize("f(a, b)"))
    # => [Token(SYMBOL, 'f', 0), Token(OPEN_PAREN, '(', 1), Token(SYMBOL, 'a', 2),
    #     Token(COMMA, ',', 3), Token(SYMBOL, 'b', 5), Token(CLOSE_PAREN, ')', 6)]

Whitespace between tokens is discarded. There is no end-of-input token;
the iterator simply stops.
"""

from enum import Enum
from typing import Iterator, NamedTuple

from .errors import UnexpectedCharacter
from .expr import is_identifier_char, is_identifier_start


class TokenKind(Enum):
    SYMBOL = "identifier"
    OPEN_PAREN = "'('"
    CLOSE_PAREN = "')'"
    COMMA = "','"
    EQUALS = "'='"


class Token(NamedTuple):
    """A token and where it starts in the source."""

    kind: TokenKind
    text: str
    position: int

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.position})"


# Single-character tokens
PUNCTUATION = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    ",": TokenKind.COMMA,
    "=": TokenKind.EQUALS,
}

WHITESPACE = " \t\n\r"


def tokenize(source: str) -> Iterator[Token]:
    """
    Tokenize source text.

    Identifiers are [A-Za-z_][A-Za-z0-9_]*; the only other tokens are
    the characters ( ) , and =.

    Args:
        source: Text to tokenize

    Yields:
        Tokens in source order

    Raises:
        UnexpectedCharacter: On any character that starts no token. The
            error is raised when the stream reaches it, so tokens before
            it have already been produced.
    """
    i = 0
    n = len(source)
    while i < n:
        c = source[i]

        if c in WHITESPACE:
            i += 1
            continue

        kind = PUNCTUATION.get(c)
        if kind is not None:
            yield Token(kind, c, i)
            i += 1
            continue

        if is_identifier_start(c):
            start = i
            while i < n and is_identifier_char(source[i]):
                i += 1
            yield Token(TokenKind.SYMBOL, source[start:i], start)
            continue

        raise UnexpectedCharacter(c, i)
