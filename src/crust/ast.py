"""AST node types for parsed crust programs.

Nodes compare structurally; spans are carried for diagnostics only and
do not take part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from crust.tokens import Span


@dataclass(frozen=True, slots=True)
class Identifier:
    """A name reference, or the bound name of a let statement."""

    value: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class IntegerLiteral:
    """Signed 64-bit integer literal."""

    value: int
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class PrefixExpression:
    """Unary operator applied to its operand: !x, -x."""

    operator: str
    right: Expression
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class InfixExpression:
    """Binary operator between two operands."""

    left: Expression
    operator: str
    right: Expression
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class IfExpression:
    """if (condition) { consequence } else { alternative }"""

    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class FunctionLiteral:
    """fn(parameters) { body }"""

    parameters: tuple[Identifier, ...]
    body: BlockStatement
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class CallExpression:
    """function(arguments); function may be any expression."""

    function: Expression
    arguments: tuple[Expression, ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class LetStatement:
    name: Identifier
    value: Expression
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    return_value: Expression
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    """A bare expression used as a statement."""

    expression: Expression
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class BlockStatement:
    """Brace-delimited statement list used as an if or fn body."""

    statements: tuple[Statement, ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Program:
    """Root node."""

    statements: tuple[Statement, ...]


Expression = (
    Identifier
    | IntegerLiteral
    | Boolean
    | PrefixExpression
    | InfixExpression
    | IfExpression
    | FunctionLiteral
    | CallExpression
)

Statement = LetStatement | ReturnStatement | ExpressionStatement | BlockStatement
