"""Tests for Pratt expression parsing: prefix, infix, precedence, grouping, calls."""

from __future__ import annotations

import pytest

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
    PrefixExpression,
    ReturnStatement,
)
from crust.debug import to_source
from crust.parser import PRECEDENCES, Precedence
from crust.tokens import TokenType

from tests.conftest import single_expression


class TestPrecedenceTable:
    def test_ordering(self):
        assert (
            Precedence.LOWEST
            < Precedence.EQUALS
            < Precedence.LESSGREATER
            < Precedence.SUM
            < Precedence.PRODUCT
            < Precedence.PREFIX
            < Precedence.CALL
        )

    def test_operator_levels(self):
        assert PRECEDENCES[TokenType.EQ] == Precedence.EQUALS
        assert PRECEDENCES[TokenType.LT] == Precedence.LESSGREATER
        assert PRECEDENCES[TokenType.MINUS] == Precedence.SUM
        assert PRECEDENCES[TokenType.SLASH] == Precedence.PRODUCT
        assert PRECEDENCES[TokenType.LPAREN] == Precedence.CALL
        assert TokenType.SEMICOLON not in PRECEDENCES


class TestPrefix:
    @pytest.mark.parametrize(
        "source, operator, value",
        [
            ("!5;", "!", IntegerLiteral(5)),
            ("-15;", "-", IntegerLiteral(15)),
            ("!true;", "!", Boolean(True)),
        ],
    )
    def test_prefix(self, parse_source, source, operator, value):
        expr = single_expression(parse_source(source))
        assert expr == PrefixExpression(operator, value)

    def test_nested_prefix(self, parse_source):
        expr = single_expression(parse_source("!-a"))
        assert expr == PrefixExpression("!", PrefixExpression("-", Identifier("a")))


class TestInfix:
    @pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])
    def test_binary_operator(self, parse_source, operator):
        expr = single_expression(parse_source(f"5 {operator} 5;"))
        assert expr == InfixExpression(IntegerLiteral(5), operator, IntegerLiteral(5))

    def test_booleans(self, parse_source):
        expr = single_expression(parse_source("true != false"))
        assert expr == InfixExpression(Boolean(True), "!=", Boolean(False))


class TestNesting:
    def test_product_binds_tighter(self, parse_source):
        expr = single_expression(parse_source("1 + 2 * 3;"))
        assert expr == InfixExpression(
            IntegerLiteral(1),
            "+",
            InfixExpression(IntegerLiteral(2), "*", IntegerLiteral(3)),
        )

    def test_left_associative(self, parse_source):
        expr = single_expression(parse_source("1 - 2 - 3;"))
        assert expr == InfixExpression(
            InfixExpression(IntegerLiteral(1), "-", IntegerLiteral(2)),
            "-",
            IntegerLiteral(3),
        )

    def test_grouping_overrides(self, parse_source):
        expr = single_expression(parse_source("(1 + 2) * 3;"))
        assert expr == InfixExpression(
            InfixExpression(IntegerLiteral(1), "+", IntegerLiteral(2)),
            "*",
            IntegerLiteral(3),
        )

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("-a * b", "((-a) * b)"),
            ("!-a", "(!(-a))"),
            ("a + b + c", "((a + b) + c)"),
            ("a + b - c", "((a + b) - c)"),
            ("a * b * c", "((a * b) * c)"),
            ("a * b / c", "((a * b) / c)"),
            ("a + b / c", "(a + (b / c))"),
            ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
            ("3 + 4; -5 * 5", "(3 + 4)((-5) * 5)"),
            ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
            ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
            ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
            ("true", "true"),
            ("3 > 5 == false", "((3 > 5) == false)"),
            ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
            ("(5 + 5) * 2", "((5 + 5) * 2)"),
            ("2 / (5 + 5)", "(2 / (5 + 5))"),
            ("-(5 + 5)", "(-(5 + 5))"),
            ("!(true == true)", "(!(true == true))"),
            ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
            (
                "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
                "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
            ),
            ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
        ],
    )
    def test_rendered_nesting(self, parse_source, source, expected):
        assert to_source(parse_source(source)) == expected


class TestCalls:
    def test_call_arguments(self, parse_source):
        expr = single_expression(parse_source("add(1, 2 * 3, 4 + 5);"))
        assert isinstance(expr, CallExpression)
        assert expr.function == Identifier("add")
        assert len(expr.arguments) == 3
        assert expr.arguments[0] == IntegerLiteral(1)
        assert to_source(expr.arguments[1]) == "(2 * 3)"

    def test_no_arguments(self, parse_source):
        expr = single_expression(parse_source("f()"))
        assert expr == CallExpression(Identifier("f"), ())

    def test_chained_calls(self, parse_source):
        expr = single_expression(parse_source("f(1)(2)"))
        assert expr == CallExpression(
            CallExpression(Identifier("f"), (IntegerLiteral(1),)),
            (IntegerLiteral(2),),
        )

    def test_call_binds_tighter_than_prefix(self, parse_source):
        assert to_source(parse_source("-f(x)")) == "(-f(x))"

    def test_call_on_function_literal(self, parse_source):
        expr = single_expression(parse_source("fn(x) { x }(5)"))
        assert isinstance(expr, CallExpression)
        assert isinstance(expr.function, FunctionLiteral)


class TestIfExpressions:
    def test_if(self, parse_source):
        expr = single_expression(parse_source("if (x < y) { x }"))
        assert expr == IfExpression(
            InfixExpression(Identifier("x"), "<", Identifier("y")),
            BlockStatement((ExpressionStatement(Identifier("x")),)),
            None,
        )

    def test_if_else(self, parse_source):
        expr = single_expression(parse_source("if (x < y) { x } else { y }"))
        assert isinstance(expr, IfExpression)
        assert expr.alternative == BlockStatement((ExpressionStatement(Identifier("y")),))

    def test_empty_blocks(self, parse_source):
        expr = single_expression(parse_source("if (true) {} else {}"))
        assert expr.consequence == BlockStatement(())
        assert expr.alternative == BlockStatement(())

    def test_statement_after_if(self, parse_source):
        program = parse_source("if (a) { 1 } let b = 2;")
        assert len(program.statements) == 2

    def test_nested_if(self, parse_source):
        expr = single_expression(parse_source("if (a) { if (b) { c } }"))
        inner = expr.consequence.statements[0].expression
        assert isinstance(inner, IfExpression)


class TestFunctionLiterals:
    def test_function(self, parse_source):
        expr = single_expression(parse_source("fn(x, y) { x + y; }"))
        assert isinstance(expr, FunctionLiteral)
        assert expr.parameters == (Identifier("x"), Identifier("y"))
        assert to_source(expr.body) == "(x + y)"

    @pytest.mark.parametrize(
        "source, params",
        [("fn() {};", []), ("fn(x) {};", ["x"]), ("fn(x, y, z) {};", ["x", "y", "z"])],
    )
    def test_parameters(self, parse_source, source, params):
        expr = single_expression(parse_source(source))
        assert [p.value for p in expr.parameters] == params

    def test_return_in_body(self, parse_source):
        expr = single_expression(parse_source("fn(n) { return n * 2; }"))
        stmt = expr.body.statements[0]
        assert isinstance(stmt, ReturnStatement)

    def test_let_bound_function(self, parse_source):
        program = parse_source("let add = fn(a, b) { a + b };\nadd(1, 2);")
        assert to_source(program) == "let add = fn(a, b) (a + b);add(1, 2)"


class TestIntegerLiterals:
    def test_max_int64(self, parse_source):
        expr = single_expression(parse_source("9223372036854775807"))
        assert expr == IntegerLiteral(2**63 - 1)

    def test_zero(self, parse_source):
        assert single_expression(parse_source("0")) == IntegerLiteral(0)
