"""
Kaleido Recursive Descent Parser

Recursive descent for primaries, prototypes and top-level forms, with
operator-precedence climbing for binary operator chains. Precedences come
from the session's table, so the set of binary operators is whatever the
session installed rather than something fixed in the grammar.

Every parse method returns a complete node or None. On None the parser has
already reported the error; callers must not assume any progress was made.

Author: xwest
"""

from typing import List, Optional, Union, TextIO

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType
from ..context import SessionContext
from .ast_nodes import (
    Expression, NumberExpr, VariableExpr, BinaryExpr, CallExpr,
    Prototype, Function
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unclosed_paren_error,
    create_argument_list_error, create_prototype_error
)


class Parser:
    """
    Kaleido parser with one token of lookahead.

    ``current_token`` is the token being looked at; ``advance()`` replaces
    it with the next one from the lexer.
    """

    def __init__(self, lexer: Lexer, context: Optional[SessionContext] = None):
        """
        Initialize the parser.

        Args:
            lexer: Token source
            context: Session state (precedence table, anonymous naming,
                diagnostic stream). A fresh one is created if omitted.
        """
        self.lexer = lexer
        self.context = context if context is not None else SessionContext()
        self.current_token: Optional[Token] = None
        self.errors: List[ParseError] = []

    def advance(self) -> Token:
        """Read the next token into ``current_token`` and return it."""
        self.current_token = self.lexer.next_token()
        return self.current_token

    # Top-level forms

    def parse_definition(self) -> Optional[Function]:
        """definition ::= 'def' prototype expression"""
        self.advance()  # eat 'def'
        prototype = self.parse_prototype()
        if prototype is None:
            return None
        body = self.parse_expression()
        if body is None:
            return None
        return Function(prototype, body)

    def parse_extern(self) -> Optional[Prototype]:
        """external ::= 'extern' prototype"""
        self.advance()  # eat 'extern'
        return self.parse_prototype()

    def parse_top_level_expr(self) -> Optional[Function]:
        """toplevelexpr ::= expression, wrapped in a zero-argument function."""
        expr = self.parse_expression()
        if expr is None:
            return None
        prototype = Prototype(self.context.next_anonymous_name(), ())
        return Function(prototype, expr)

    def parse_prototype(self) -> Optional[Prototype]:
        """prototype ::= identifier '(' identifier* ')'"""
        if self.current_token.type != TokenType.IDENTIFIER:
            return self._error(create_prototype_error("function name", self.current_token))
        name = self.current_token.value
        self.advance()

        if not self.current_token.is_char('('):
            return self._error(create_prototype_error("'('", self.current_token))

        # Parameter names are not checked for uniqueness.
        params = []
        while self.advance().type == TokenType.IDENTIFIER:
            params.append(self.current_token.value)
        if not self.current_token.is_char(')'):
            return self._error(create_prototype_error("')'", self.current_token))

        self.advance()  # eat ')'
        return Prototype(name, tuple(params))

    # Expressions

    def parse_expression(self) -> Optional[Expression]:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        if lhs is None:
            return None
        return self.parse_bin_op_rhs(0, lhs)

    def parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> Optional[Expression]:
        """
        Precedence climbing over ``(operator primary)*``.

        Consumes operators binding at least as tightly as ``min_precedence``
        and folds them into ``lhs`` left to right. When the operator after a
        right-hand side binds tighter than the current one, that operator
        gets the right-hand side first.
        """
        while True:
            token_prec = self.get_token_precedence()
            if token_prec < min_precedence:
                return lhs

            op = self.current_token.value
            self.advance()  # eat binop

            rhs = self.parse_primary()
            if rhs is None:
                return None

            next_prec = self.get_token_precedence()
            if token_prec < next_prec:
                rhs = self.parse_bin_op_rhs(token_prec + 1, rhs)
                if rhs is None:
                    return None

            lhs = BinaryExpr(op, lhs, rhs)

    def get_token_precedence(self) -> int:
        """Precedence of the current token as a binary operator, or -1."""
        if self.current_token.type != TokenType.CHAR:
            return -1
        return self.context.precedence_of(self.current_token.value)

    def parse_primary(self) -> Optional[Expression]:
        """
        primary
            ::= identifierexpr
            ::= numberexpr
            ::= parenexpr
        """
        token = self.current_token
        if token.type == TokenType.IDENTIFIER:
            return self.parse_identifier_expr()
        if token.type == TokenType.NUMBER:
            return self.parse_number_expr()
        if token.is_char('('):
            return self.parse_paren_expr()
        return self._error(create_unexpected_token_error(token))

    def parse_number_expr(self) -> NumberExpr:
        """numberexpr ::= number"""
        result = NumberExpr(self.current_token.value)
        self.advance()  # consume the number
        return result

    def parse_paren_expr(self) -> Optional[Expression]:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # eat '('
        expr = self.parse_expression()
        if expr is None:
            return None
        if not self.current_token.is_char(')'):
            return self._error(create_unclosed_paren_error(self.current_token))
        self.advance()  # eat ')'
        return expr

    def parse_identifier_expr(self) -> Optional[Expression]:
        """
        identifierexpr
            ::= identifier
            ::= identifier '(' expression (',' expression)* ')'
        """
        name = self.current_token.value
        self.advance()  # eat identifier

        if not self.current_token.is_char('('):
            return VariableExpr(name)

        self.advance()  # eat '('
        args = []
        if not self.current_token.is_char(')'):
            while True:
                arg = self.parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self.current_token.is_char(')'):
                    break
                if not self.current_token.is_char(','):
                    return self._error(create_argument_list_error(self.current_token))
                self.advance()

        self.advance()  # eat ')'
        return CallExpr(name, tuple(args))

    # Utility methods

    def _error(self, error: ParseError) -> None:
        """Record and report a syntax error; always returns None."""
        self.errors.append(error)
        self.context.report(error.diagnostic)
        return None

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


def parse_expression_string(source: Union[str, TextIO],
                            context: Optional[SessionContext] = None) -> Optional[Expression]:
    """
    Convenience function to parse a single expression.

    Returns:
        The expression, or None if it did not parse
    """
    parser = Parser(Lexer(source, "<string>"), context)
    parser.advance()
    return parser.parse_expression()
