"""Source rendering and --debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from crust.ast import (
    BlockStatement,
    Boolean,
    CallExpression,
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
)
from crust.tokens import Token


def to_source(node: object) -> str:
    """Render a node back to source with every operator application parenthesized.

    ``1 + 2 * 3`` renders as ``(1 + (2 * 3))``, which makes the parsed
    nesting visible.
    """
    if isinstance(node, Program):
        return "".join(to_source(s) for s in node.statements)
    if isinstance(node, LetStatement):
        return f"let {node.name.value} = {to_source(node.value)};"
    if isinstance(node, ReturnStatement):
        return f"return {to_source(node.return_value)};"
    if isinstance(node, ExpressionStatement):
        return to_source(node.expression)
    if isinstance(node, BlockStatement):
        return "".join(to_source(s) for s in node.statements)
    if isinstance(node, Identifier):
        return node.value
    if isinstance(node, IntegerLiteral):
        return str(node.value)
    if isinstance(node, Boolean):
        return "true" if node.value else "false"
    if isinstance(node, PrefixExpression):
        return f"({node.operator}{to_source(node.right)})"
    if isinstance(node, InfixExpression):
        return f"({to_source(node.left)} {node.operator} {to_source(node.right)})"
    if isinstance(node, IfExpression):
        out = f"if {to_source(node.condition)} {to_source(node.consequence)}"
        if node.alternative is not None:
            out += f" else {to_source(node.alternative)}"
        return out
    if isinstance(node, FunctionLiteral):
        params = ", ".join(p.value for p in node.parameters)
        return f"fn({params}) {to_source(node.body)}"
    if isinstance(node, CallExpression):
        args = ", ".join(to_source(a) for a in node.arguments)
        return f"{to_source(node.function)}({args})"
    raise TypeError(f"Cannot render {type(node).__name__}")


def format_token(tok: Token) -> str:
    """One-line token description: type name and literal."""
    return f"{tok.type.name} {tok.literal!r}"


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for stmt in program.statements:
        _dump(stmt, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(node: object, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if isinstance(node, LetStatement):
        f.write(f"{pad}Let {node.name.value}\n")
        _dump(node.value, depth + 1, f)
    elif isinstance(node, ReturnStatement):
        f.write(f"{pad}Return\n")
        _dump(node.return_value, depth + 1, f)
    elif isinstance(node, ExpressionStatement):
        f.write(f"{pad}ExpressionStatement\n")
        _dump(node.expression, depth + 1, f)
    elif isinstance(node, BlockStatement):
        f.write(f"{pad}Block\n")
        for stmt in node.statements:
            _dump(stmt, depth + 1, f)
    elif isinstance(node, Identifier):
        f.write(f"{pad}Identifier({node.value!r})\n")
    elif isinstance(node, IntegerLiteral):
        f.write(f"{pad}Integer({node.value})\n")
    elif isinstance(node, Boolean):
        f.write(f"{pad}Boolean({node.value})\n")
    elif isinstance(node, PrefixExpression):
        f.write(f"{pad}Prefix {node.operator}\n")
        _dump(node.right, depth + 1, f)
    elif isinstance(node, InfixExpression):
        f.write(f"{pad}Infix {node.operator}\n")
        _dump(node.left, depth + 1, f)
        _dump(node.right, depth + 1, f)
    elif isinstance(node, IfExpression):
        f.write(f"{pad}If\n")
        _dump(node.condition, depth + 1, f)
        _dump(node.consequence, depth + 1, f)
        if node.alternative is not None:
            f.write(f"{_indent(depth + 1)}Else\n")
            _dump(node.alternative, depth + 2, f)
    elif isinstance(node, FunctionLiteral):
        params = ", ".join(p.value for p in node.parameters)
        f.write(f"{pad}Function({params})\n")
        _dump(node.body, depth + 1, f)
    elif isinstance(node, CallExpression):
        f.write(f"{pad}Call\n")
        _dump(node.function, depth + 1, f)
        for arg in node.arguments:
            _dump(arg, depth + 1, f)
