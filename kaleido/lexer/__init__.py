"""
Kaleido Lexer Package

Incremental lexical analyzer for the Kaleido language.

Key Features:
- Pull-based: one token per call, reading only as much input as needed
- def/extern keywords, ASCII identifiers, lenient numeric literals
- '#' line comments
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer, lenient_float, tokenize_string

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "lenient_float",
    "tokenize_string",
]
