"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto


class TokenType(Enum):
    ILLEGAL = auto()  # unrecognized character
    EOF = auto()

    # Identifiers and literals
    IDENT = auto()  # add, foobar, x, y
    INT = auto()  # 1343456

    # Operators
    ASSIGN = auto()  # =
    PLUS = auto()  # +
    MINUS = auto()  # -
    BANG = auto()  # !
    ASTERISK = auto()  # *
    SLASH = auto()  # /
    LT = auto()  # <
    GT = auto()  # >
    EQ = auto()  # ==
    NOT_EQ = auto()  # !=

    # Delimiters
    COMMA = auto()  # ,
    SEMICOLON = auto()  # ;
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }

    # Keywords
    FUNCTION = auto()  # fn
    LET = auto()
    TRUE = auto()
    FALSE = auto()
    IF = auto()
    ELSE = auto()
    RETURN = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token. Equality ignores where the token came from."""

    type: TokenType
    literal: str
    span: Span | None = field(default=None, compare=False)


KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}

# Single-character tokens that never combine with a following character
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

WHITESPACE = frozenset(" \t\n\r")


def lookup_ident(ident: str) -> TokenType:
    """Return the keyword type for ident, or IDENT if it is not a keyword."""
    return KEYWORDS.get(ident, TokenType.IDENT)


def is_letter(ch: str) -> bool:
    """Return True if ch is an alphabetic character."""
    return ch.isalpha()


def is_digit(ch: str) -> bool:
    """Return True if ch is a decimal digit 0-9."""
    return "0" <= ch <= "9"


def is_extended_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def is_extended_char(ch: str) -> bool:
    return ch.isalpha() or ch == "_" or is_digit(ch)


@dataclass(frozen=True, slots=True)
class IdentifierRules:
    """Character predicates deciding where identifiers start and continue."""

    name: str
    is_start: Callable[[str], bool]
    is_part: Callable[[str], bool]


# Letters only: "foo_bar" lexes as IDENT ILLEGAL IDENT, "x1" as IDENT INT
ALPHA = IdentifierRules("alpha", is_letter, is_letter)

# Letters or underscore first, then letters, digits and underscores
EXTENDED = IdentifierRules("extended", is_extended_start, is_extended_char)

IDENTIFIER_STYLES: dict[str, IdentifierRules] = {
    ALPHA.name: ALPHA,
    EXTENDED.name: EXTENDED,
}
