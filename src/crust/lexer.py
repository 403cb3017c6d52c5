"""crust lexer — converts source text into a lazy token stream."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from crust.tokens import (
    ALPHA,
    SINGLE_CHAR_TOKENS,
    WHITESPACE,
    IdentifierRules,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    lookup_ident,
)


class Lexer:
    """Tokenize crust source text one token at a time.

    ``position`` is the index of the current character ``ch`` and
    ``read_position`` the index of the next one. ``ch`` is None once the
    input is exhausted; from then on every call returns EOF.
    """

    def __init__(self, source: str, identifiers: IdentifierRules = ALPHA) -> None:
        self._source = source
        self._identifiers = identifiers
        self.position = 0
        self.read_position = 0
        self.ch: str | None = None
        self._line = 1
        self._col = 1
        self._read_char()

    @property
    def source(self) -> str:
        return self._source

    @property
    def identifiers(self) -> IdentifierRules:
        return self._identifiers

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        self._skip_whitespace()
        start = self._current_pos()
        ch = self.ch

        if ch is None:
            return Token(TokenType.EOF, "", Span(start, start))

        if ch == "=":
            return self._lex_two_char("=", TokenType.EQ, TokenType.ASSIGN, start)

        if ch == "!":
            return self._lex_two_char("=", TokenType.NOT_EQ, TokenType.BANG, start)

        tt = SINGLE_CHAR_TOKENS.get(ch)
        if tt is not None:
            self._read_char()
            return self._token(tt, ch, start)

        if self._identifiers.is_start(ch):
            text = self._read_while(self._identifiers.is_part)
            return self._token(lookup_ident(text), text, start)

        if is_digit(ch):
            text = self._read_while(is_digit)
            return self._token(TokenType.INT, text, start)

        self._read_char()
        return self._token(TokenType.ILLEGAL, ch, start)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _read_char(self) -> None:
        if self.ch is not None:
            if self.ch == "\n":
                self._line += 1
                self._col = 1
            else:
                self._col += 1

        if self.read_position >= len(self._source):
            self.ch = None
        else:
            self.ch = self._source[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def _peek_char(self) -> str | None:
        if self.read_position >= len(self._source):
            return None
        return self._source[self.read_position]

    def _current_pos(self) -> Position:
        # Past the end, position runs one beyond the source length
        return Position(self._line, self._col, min(self.position, len(self._source)))

    def _token(self, tt: TokenType, literal: str, start: Position) -> Token:
        return Token(tt, literal, Span(start, self._current_pos()))

    def _skip_whitespace(self) -> None:
        while self.ch is not None and self.ch in WHITESPACE:
            self._read_char()

    def _read_while(self, accept: Callable[[str], bool]) -> str:
        """Consume the current character and every following one accept() allows."""
        start = self.position
        self._read_char()
        while self.ch is not None and accept(self.ch):
            self._read_char()
        return self._source[start : self.position]

    def _lex_two_char(
        self, second: str, matched: TokenType, single: TokenType, start: Position
    ) -> Token:
        first = self.ch
        assert first is not None
        if self._peek_char() == second:
            self._read_char()
            self._read_char()
            return self._token(matched, first + second, start)
        self._read_char()
        return self._token(single, first, start)


def tokenize(source: str, identifiers: IdentifierRules = ALPHA) -> list[Token]:
    """Convenience function: tokenize source text and return the token list, EOF included."""
    return list(Lexer(source, identifiers))
