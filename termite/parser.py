"""
Recursive-descent parser for expressions and rules.

Grammar:
    expr   := SYMBOL
            | SYMBOL '(' args? ')'
    args   := expr (',' expr)*
    rule   := expr '=' expr

An identifier followed directly by '(' starts an application; otherwise
it is a bare symbol. The parser reads tokens lazily, looks at most one
token ahead and stops at the first error.
"""

from typing import Iterable, Iterator, List, Optional

from .errors import UnexpectedEndOfInput, UnexpectedToken
from .expr import Application, Expr, Rule, Symbol
from .lexer import Token, TokenKind, tokenize


class Parser:
    """
    Parser over a token stream.

    Examples:
        Parser(tokenize("f(a)")).parse_expr()       # => Application('f', (Symbol('a'),))
        Parser(tokenize("f(X) = X")).parse_rule()   # => Rule(...)
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._lookahead: Optional[Token] = None
        self._exhausted = False

    def _peek(self) -> Optional[Token]:
        """Return the next token without consuming it (None at end)."""
        if self._lookahead is None and not self._exhausted:
            self._lookahead = next(self._tokens, None)
            if self._lookahead is None:
                self._exhausted = True
        return self._lookahead

    def _advance(self) -> Optional[Token]:
        token = self._peek()
        self._lookahead = None
        return token

    def _expect(self, kind: TokenKind) -> Token:
        token = self._advance()
        if token is None:
            raise UnexpectedEndOfInput(kind.value)
        if token.kind is not kind:
            raise UnexpectedToken(kind.value, token)
        return token

    def expect_end(self) -> None:
        """Fail if any token is left."""
        token = self._peek()
        if token is not None:
            raise UnexpectedToken("end of input", token)

    def parse_expr(self) -> Expr:
        """Parse one expression."""
        name = self._expect(TokenKind.SYMBOL).text

        token = self._peek()
        if token is None or token.kind is not TokenKind.OPEN_PAREN:
            return Symbol(name)

        self._advance()
        return Application(name, tuple(self._parse_args()))

    def _parse_args(self) -> List[Expr]:
        """Parse the argument list after '(' up to and including ')'."""
        args: List[Expr] = []

        token = self._peek()
        if token is not None and token.kind is TokenKind.CLOSE_PAREN:
            self._advance()
            return args

        args.append(self.parse_expr())
        while True:
            token = self._advance()
            if token is None:
                raise UnexpectedEndOfInput("',' or ')'")
            if token.kind is TokenKind.CLOSE_PAREN:
                return args
            if token.kind is not TokenKind.COMMA:
                raise UnexpectedToken("',' or ')'", token)
            args.append(self.parse_expr())

    def parse_rule(self) -> Rule:
        """Parse ``pattern = body``."""
        head = self.parse_expr()
        self._expect(TokenKind.EQUALS)
        body = self.parse_expr()
        return Rule(head, body)


def parse_expr(source: str) -> Expr:
    """
    Parse a complete expression from text.

    Examples:
        parse_expr("a")            # => Symbol('a')
        parse_expr("f(a, g(b))")   # => Application('f', (Symbol('a'), Application('g', ...)))

    Raises:
        LexError, ParseError: If the text is not exactly one expression
    """
    parser = Parser(tokenize(source))
    expr = parser.parse_expr()
    parser.expect_end()
    return expr


def parse_rule(source: str) -> Rule:
    """
    Parse a complete rule from text.

    Example:
        parse_rule("swap(pair(a, b)) = pair(b, a)")

    Raises:
        LexError, ParseError: If the text is not exactly one rule
    """
    parser = Parser(tokenize(source))
    rule = parser.parse_rule()
    parser.expect_end()
    return rule
