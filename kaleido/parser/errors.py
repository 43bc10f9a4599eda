"""
Error handling for the Kaleido parser.

Syntax errors are not raised. The parser builds a ParseError, reports it to
the session and returns None to its caller; every caller checks for None
and gives up on the statement.

Author: xwest
"""

from typing import Optional

from ..lexer.tokens import Token, TokenType
from ..diagnostics import Diagnostic


class ParseError:
    """
    A syntax error: the parser could not produce a node.

    Wraps a Diagnostic and remembers the token that was current when the
    parse failed.
    """

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=token.location if token is not None else None,
            severity="error",
            code=code,
            help_text=help_text
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)

    def __repr__(self) -> str:
        return f"ParseError({self.message!r}, code={self.diagnostic.code!r})"


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Unclosed delimiter",
    "P003": "Malformed argument list",
    "P004": "Malformed prototype",
}


def describe_token(token: Token) -> str:
    """Short human description of a token for help texts."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.CHAR:
        return f"'{token.value}'"
    return f"{token.type.name.lower()} '{token.lexeme}'"


# Helper functions for creating common parser errors

def create_unexpected_token_error(token: Token) -> ParseError:
    """No expression can start with this token."""
    return ParseError(
        "unknown token when expecting an expression",
        token,
        code="P001",
        help_text=f"found {describe_token(token)}"
    )


def create_unclosed_paren_error(token: Token) -> ParseError:
    """A parenthesized expression was not closed."""
    return ParseError(
        "expected ')'",
        token,
        code="P002",
        help_text=f"found {describe_token(token)}"
    )


def create_argument_list_error(token: Token) -> ParseError:
    """Something other than ',' or ')' followed a call argument."""
    return ParseError(
        "Expected ')' or ',' in argument list",
        token,
        code="P003",
        help_text=f"found {describe_token(token)}"
    )


def create_prototype_error(expected: str, token: Token) -> ParseError:
    """A prototype is missing its name or one of its parentheses."""
    return ParseError(
        f"Expected {expected} in prototype",
        token,
        code="P004",
        help_text=f"found {describe_token(token)}"
    )
