"""
Kaleido Parser Package

Recursive descent parser with operator-precedence climbing for the Kaleido
language. Produces immutable AST nodes, or None plus a reported syntax
error.

Key Features:
- One token of lookahead over an incremental lexer
- Binary operators and their precedences taken from the session
- def / extern / bare expression top-level forms
- Errors reported, never raised

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse_expression_string
from .errors import ParseError, PARSER_ERROR_CODES

__all__ = [
    # Core parser
    "Parser", "parse_expression_string",

    # AST nodes
    "ASTNodeType", "Expression", "EXPRESSION_TYPES",
    "NumberExpr", "VariableExpr", "BinaryExpr", "CallExpr",
    "Prototype", "Function",

    # Error handling
    "ParseError", "PARSER_ERROR_CODES",
]
