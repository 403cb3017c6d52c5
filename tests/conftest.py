"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from crust.ast import ExpressionStatement, Program
from crust.lexer import Lexer, tokenize
from crust.parser import Parser
from crust.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source, asserts no errors, and returns the Program."""

    def _parse(source: str) -> Program:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        assert parser.errors == [], f"Unexpected parse errors: {parser.errors}"
        return program

    return _parse


@pytest.fixture
def parse_errors():
    """Return a helper that parses source and returns (program, error messages)."""

    def _parse(source: str) -> tuple[Program, list[str]]:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        return program, parser.errors

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_literals(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token literals match the expected list."""
    actual = [t.literal for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def single_expression(program: Program):
    """Return the expression of a one-statement program."""
    assert len(program.statements) == 1, f"Expected 1 statement, got {len(program.statements)}"
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement), (
        f"Expected ExpressionStatement, got {type(stmt).__name__}"
    )
    return stmt.expression
