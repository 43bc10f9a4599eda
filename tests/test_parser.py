"""
Test suite for the Kaleido parser.

Tests cover:
- Operator precedence and associativity
- Prototypes, definitions and externs
- Calls and parenthesized expressions
- Syntax error reporting

Author: xwest
"""

import io
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleido.context import SessionContext
from kaleido.lexer.lexer import Lexer
from kaleido.lexer.tokens import TokenType
from kaleido.parser.parser import Parser, parse_expression_string
from kaleido.parser.ast_nodes import (
    ASTNodeType, NumberExpr, VariableExpr, BinaryExpr, CallExpr, Prototype, Function
)


def num(value):
    return NumberExpr(float(value))


def var(name):
    return VariableExpr(name)


class TestParser(unittest.TestCase):
    """Test cases for the parser."""

    def setUp(self):
        """Set up test fixtures."""
        self.output = io.StringIO()
        self.context = SessionContext(stream=self.output)

    def _parser(self, source: str) -> Parser:
        parser = Parser(Lexer(source), self.context)
        parser.advance()
        return parser

    def _expr(self, source: str):
        return parse_expression_string(source, self.context)

    def test_multiplication_binds_tighter(self):
        """1+2*3 parses as 1+(2*3)."""
        self.assertEqual(
            self._expr("1+2*3"),
            BinaryExpr('+', num(1), BinaryExpr('*', num(2), num(3)))
        )

    def test_multiplication_first(self):
        """1*2+3 parses as (1*2)+3."""
        self.assertEqual(
            self._expr("1*2+3"),
            BinaryExpr('+', BinaryExpr('*', num(1), num(2)), num(3))
        )

    def test_left_associativity(self):
        """1-2-3 parses as (1-2)-3."""
        self.assertEqual(
            self._expr("1-2-3"),
            BinaryExpr('-', BinaryExpr('-', num(1), num(2)), num(3))
        )

    def test_mixed_precedence_chain(self):
        """a<b+c*d-e parses as a<((b+(c*d))-e)."""
        expected = BinaryExpr(
            '<', var('a'),
            BinaryExpr('-', BinaryExpr('+', var('b'), BinaryExpr('*', var('c'), var('d'))), var('e'))
        )
        self.assertEqual(self._expr("a<b+c*d-e"), expected)

    def test_parentheses_override_precedence(self):
        self.assertEqual(
            self._expr("(1+2)*3"),
            BinaryExpr('*', BinaryExpr('+', num(1), num(2)), num(3))
        )

    def test_expression_stops_at_non_operator(self):
        parser = self._parser("x y")

        self.assertEqual(parser.parse_expression(), var('x'))
        self.assertEqual(parser.current_token.value, 'y')

    def test_calls(self):
        self.assertEqual(self._expr("foo()"), CallExpr('foo', ()))
        self.assertEqual(
            self._expr("foo(1, x+2, bar(y))"),
            CallExpr('foo', (num(1), BinaryExpr('+', var('x'), num(2)), CallExpr('bar', (var('y'),))))
        )

    def test_definition(self):
        """def foo(a b) a+b"""
        function = self._parser("def foo(a b) a+b").parse_definition()

        self.assertIsInstance(function, Function)
        self.assertEqual(function.prototype, Prototype('foo', ('a', 'b')))
        self.assertEqual(function.prototype.arity, 2)
        self.assertEqual(function.body, BinaryExpr('+', var('a'), var('b')))
        self.assertEqual(function.node_type, ASTNodeType.FUNCTION)

    def test_duplicate_parameters_are_accepted(self):
        """Parameter names are not checked for uniqueness."""
        function = self._parser("def dup(a a) a").parse_definition()

        self.assertEqual(function.prototype.params, ('a', 'a'))
        self.assertEqual(self.context.diagnostics, [])

    def test_extern(self):
        prototype = self._parser("extern sin(x)").parse_extern()

        self.assertEqual(prototype, Prototype('sin', ('x',)))
        self.assertEqual(str(prototype), "sin(x)")

    def test_empty_parameter_list(self):
        prototype = self._parser("extern rand()").parse_extern()

        self.assertEqual(prototype, Prototype('rand', ()))

    def test_top_level_expression_is_wrapped(self):
        parser = self._parser("1+2; 3")
        first = parser.parse_top_level_expr()
        parser.advance()  # ';'
        second = parser.parse_top_level_expr()

        self.assertEqual(first.prototype, Prototype("__anon_expr1", ()))
        self.assertEqual(first.body, BinaryExpr('+', num(1), num(2)))
        self.assertEqual(second.name, "__anon_expr2")
        self.assertEqual(self.context.anonymous_count, 2)
        self.assertTrue(self.context.is_anonymous(second.name))

    def test_custom_precedence_table(self):
        """Operators come from the session, not the grammar."""
        context = SessionContext(precedence={'+': 50, '*': 10}, stream=self.output)

        self.assertEqual(
            parse_expression_string("1+2*3", context),
            BinaryExpr('*', BinaryExpr('+', num(1), num(2)), num(3))
        )

    def test_non_positive_precedence_is_not_an_operator(self):
        context = SessionContext(precedence={'+': 20, '^': 0}, stream=self.output)
        parser = Parser(Lexer("1^2"), context)
        parser.advance()

        self.assertEqual(parser.parse_expression(), num(1))
        self.assertEqual(parser.get_token_precedence(), -1)

    def test_get_token_precedence(self):
        parser = self._parser("* x")

        self.assertEqual(parser.get_token_precedence(), 40)
        parser.advance()
        self.assertEqual(parser.get_token_precedence(), -1)


class TestParserErrors(unittest.TestCase):
    """Syntax errors are reported and turn into None."""

    def setUp(self):
        self.output = io.StringIO()
        self.context = SessionContext(stream=self.output)

    def _parser(self, source: str) -> Parser:
        parser = Parser(Lexer(source), self.context)
        parser.advance()
        return parser

    def _assert_error(self, parser: Parser, message: str):
        self.assertTrue(parser.has_errors)
        self.assertEqual(parser.errors[-1].message, message)
        self.assertIn(f"Error: {message}\n", self.output.getvalue())

    def test_unknown_token(self):
        parser = self._parser(")")

        self.assertIsNone(parser.parse_expression())
        self._assert_error(parser, "unknown token when expecting an expression")
        self.assertEqual(parser.errors[0].diagnostic.code, "P001")

    def test_missing_right_operand(self):
        parser = self._parser("1 +")

        self.assertIsNone(parser.parse_expression())
        self._assert_error(parser, "unknown token when expecting an expression")

    def test_unclosed_paren(self):
        parser = self._parser("(1 + 2;")

        self.assertIsNone(parser.parse_expression())
        self._assert_error(parser, "expected ')'")

    def test_bad_argument_list(self):
        parser = self._parser("foo(1 2)")

        self.assertIsNone(parser.parse_expression())
        self._assert_error(parser, "Expected ')' or ',' in argument list")

    def test_prototype_without_name(self):
        parser = self._parser("def (x) x")

        self.assertIsNone(parser.parse_definition())
        self._assert_error(parser, "Expected function name in prototype")
        self.assertTrue(parser.current_token.is_char('('))

    def test_prototype_without_open_paren(self):
        parser = self._parser("extern sin x")

        self.assertIsNone(parser.parse_extern())
        self._assert_error(parser, "Expected '(' in prototype")

    def test_prototype_without_close_paren(self):
        parser = self._parser("def f(a, b) a")

        self.assertIsNone(parser.parse_definition())
        self._assert_error(parser, "Expected ')' in prototype")

    def test_definition_with_bad_body(self):
        parser = self._parser("def f(x) )")

        self.assertIsNone(parser.parse_definition())
        self.assertEqual(len(parser.errors), 1)

    def test_error_location(self):
        parser = self._parser("1 +\n  )")

        parser.parse_expression()
        location = parser.errors[0].diagnostic.location
        self.assertEqual((location.line, location.column), (2, 3))

    def test_no_partial_nodes(self):
        """A failed call parse yields None, not a partial CallExpr."""
        parser = self._parser("foo(1, )")

        self.assertIsNone(parser.parse_expression())
        self.assertEqual(parser.current_token.type, TokenType.CHAR)


if __name__ == '__main__':
    unittest.main()
