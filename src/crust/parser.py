"""crust parser — converts a token stream into an AST.

Statements are parsed by recursive descent, expressions by precedence
climbing (Pratt parsing). Syntax errors are collected, not raised: every
failing construct records a ParseError, yields None, and the parser
resynchronizes at the next statement boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, auto

from crust.ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from crust.errors import ParseError, ParseFailed
from crust.lexer import Lexer
from crust.tokens import ALPHA, IdentifierRules, Position, Span, Token, TokenType


class Precedence(IntEnum):
    LOWEST = auto()
    EQUALS = auto()  # ==
    LESSGREATER = auto()  # > or <
    SUM = auto()  # +
    PRODUCT = auto()  # *
    PREFIX = auto()  # -X or !X
    CALL = auto()  # myFunction(X)


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

INT64_MAX = 2**63 - 1

# Each nesting level costs a handful of Python frames; stay well inside
# the interpreter's recursion limit.
MAX_NESTING_DEPTH = 64

_NO_SPAN = Span(Position(1, 1, 0), Position(1, 1, 0))

PrefixRule = Callable[[], Expression | None]
InfixRule = Callable[[Expression], Expression | None]


class Parser:
    """Pratt parser over a Lexer, with one token of lookahead."""

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._diagnostics: list[ParseError] = []
        self._block_depth = 0
        self._expression_depth = 0

        self.current_token = Token(TokenType.ILLEGAL, "")
        self.peek_token = Token(TokenType.ILLEGAL, "")

        self._prefix_rules: dict[TokenType, PrefixRule] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
        }
        self._infix_rules: dict[TokenType, InfixRule] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
        }

        # Prime current_token and peek_token
        self._next_token()
        self._next_token()

    @property
    def errors(self) -> list[str]:
        """Error messages in the order they were found."""
        return [d.message for d in self._diagnostics]

    @property
    def diagnostics(self) -> list[ParseError]:
        """Collected errors with their source spans."""
        return list(self._diagnostics)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _next_token(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self._lexer.next_token()

    def current_token_is(self, tt: TokenType) -> bool:
        return self.current_token.type == tt

    def peek_token_is(self, tt: TokenType) -> bool:
        return self.peek_token.type == tt

    def expect_peek(self, tt: TokenType) -> bool:
        """Advance if the peek token has type tt, else record an error and stay put."""
        if self.peek_token_is(tt):
            self._next_token()
            return True
        self._peek_error(tt)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current_token.type, Precedence.LOWEST)

    def _synchronize(self) -> None:
        """Skip to the end of the failed statement.

        Stops on ';' or EOF. Inside a block it also stops at a '}' so the
        block can still close.
        """
        while not self.current_token_is(TokenType.SEMICOLON) and not self.current_token_is(
            TokenType.EOF
        ):
            if self._block_depth > 0 and self.current_token_is(TokenType.RBRACE):
                return
            self._next_token()

    def _skip_to_terminator(self) -> None:
        """Discard trailing tokens of a let/return up to and including its ';'.

        Stops short of EOF, and of a '}' inside a block, leaving them for
        the enclosing loop.
        """
        while not self.peek_token_is(TokenType.SEMICOLON) and not self.peek_token_is(
            TokenType.EOF
        ):
            if self._block_depth > 0 and self.peek_token_is(TokenType.RBRACE):
                return
            self._next_token()
        if self.peek_token_is(TokenType.SEMICOLON):
            self._next_token()

    def _span(self, start: Span | None) -> Span | None:
        """Span from start to the end of the current token."""
        end = self.current_token.span
        if start is None or end is None:
            return None
        return Span(start.start, end.end)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(self, message: str, tok: Token) -> None:
        span = tok.span if tok.span is not None else _NO_SPAN
        self._diagnostics.append(ParseError(message, span, self._lexer.source))

    def _peek_error(self, tt: TokenType) -> None:
        got = self.peek_token
        self._error(f"expected {tt.name}, but got {_describe(got)} instead", got)

    def _no_prefix_error(self) -> None:
        tok = self.current_token
        self._error(f"no prefix parse function for {tok.type.name}", tok)

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        statements: list[Statement] = []

        while not self.current_token_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is None:
                self._synchronize()
            else:
                statements.append(stmt)
            self._next_token()

        return Program(tuple(statements))

    def _parse_statement(self) -> Statement | None:
        if self.current_token_is(TokenType.LET):
            return self._parse_let_statement()
        if self.current_token_is(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement | None:
        start = self.current_token.span

        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.current_token.literal, self.current_token.span)

        if not self.expect_peek(TokenType.ASSIGN):
            return None

        self._next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self._skip_to_terminator()
        return LetStatement(name, value, self._span(start))

    def _parse_return_statement(self) -> ReturnStatement | None:
        start = self.current_token.span
        self._next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self._skip_to_terminator()
        return ReturnStatement(value, self._span(start))

    def _parse_expression_statement(self) -> ExpressionStatement | None:
        start = self.current_token.span
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ExpressionStatement(expression, self._span(start))

    def _parse_block_statement(self) -> BlockStatement | None:
        start = self.current_token.span  # LBRACE
        statements: list[Statement] = []
        self._block_depth += 1
        self._next_token()

        while not self.current_token_is(TokenType.RBRACE):
            if self.current_token_is(TokenType.EOF):
                self._error(
                    f"expected {TokenType.RBRACE.name}, but got {_describe(self.current_token)} instead",
                    self.current_token,
                )
                self._block_depth -= 1
                return None

            stmt = self._parse_statement()
            if stmt is None:
                self._synchronize()
                if self.current_token_is(TokenType.RBRACE):
                    continue
            else:
                statements.append(stmt)
            self._next_token()

        self._block_depth -= 1
        return BlockStatement(tuple(statements), self._span(start))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        if self._expression_depth >= MAX_NESTING_DEPTH:
            self._error("expression nested too deeply", self.current_token)
            return None

        self._expression_depth += 1
        try:
            return self._parse_expression(precedence)
        finally:
            self._expression_depth -= 1

    def _parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self._prefix_rules.get(self.current_token.type)
        if prefix is None:
            self._no_prefix_error()
            return None

        left = prefix()
        # Strict comparison: equal precedence binds to the left
        while left is not None and precedence < self._peek_precedence():
            infix = self._infix_rules.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Identifier:
        return Identifier(self.current_token.literal, self.current_token.span)

    def _parse_integer_literal(self) -> IntegerLiteral | None:
        tok = self.current_token
        # Literals are unsigned digit runs; -9223372036854775808 is out of reach
        value = int(tok.literal)
        if value > INT64_MAX:
            self._error(f"could not parse {tok.literal} as integer", tok)
            return None
        return IntegerLiteral(value, tok.span)

    def _parse_boolean(self) -> Boolean:
        return Boolean(self.current_token_is(TokenType.TRUE), self.current_token.span)

    def _parse_prefix_expression(self) -> PrefixExpression | None:
        tok = self.current_token
        self._next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(tok.literal, right, self._span(tok.span))

    def _parse_infix_expression(self, left: Expression) -> InfixExpression | None:
        tok = self.current_token
        precedence = self._current_precedence()
        self._next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(left, tok.literal, right, self._span(left.span))

    def _parse_grouped_expression(self) -> Expression | None:
        self._next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> IfExpression | None:
        start = self.current_token.span

        if not self.expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenType.RPAREN):
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self._next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(condition, consequence, alternative, self._span(start))

    def _parse_function_literal(self) -> FunctionLiteral | None:
        start = self.current_token.span

        if not self.expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(tuple(parameters), body, self._span(start))

    def _parse_function_parameters(self) -> list[Identifier] | None:
        parameters: list[Identifier] = []

        if self.peek_token_is(TokenType.RPAREN):
            self._next_token()
            return parameters

        if not self.expect_peek(TokenType.IDENT):
            return None
        parameters.append(self._parse_identifier())

        while self.peek_token_is(TokenType.COMMA):
            self._next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            parameters.append(self._parse_identifier())

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def _parse_call_expression(self, function: Expression) -> CallExpression | None:
        arguments = self._parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(function, tuple(arguments), self._span(function.span))

    def _parse_call_arguments(self) -> list[Expression] | None:
        arguments: list[Expression] = []

        if self.peek_token_is(TokenType.RPAREN):
            self._next_token()
            return arguments

        self._next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        arguments.append(arg)

        while self.peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            arguments.append(arg)

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return arguments


def _describe(tok: Token) -> str:
    """Literal text of tok for error messages; EOF has no text of its own."""
    if tok.type == TokenType.EOF:
        return TokenType.EOF.name
    return tok.literal


def parse(
    source: str,
    filename: str = "input.crust",
    identifiers: IdentifierRules = ALPHA,
) -> Program:
    """Convenience function: parse source text, raising ParseFailed on any error."""
    parser = Parser(Lexer(source, identifiers))
    program = parser.parse_program()
    if parser.diagnostics:
        raise ParseFailed(parser.diagnostics, filename)
    return program
