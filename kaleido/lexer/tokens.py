"""
Token definitions for the Kaleido lexer.

The language is small enough that the lexer only knows five kinds of token
plus a catch-all for single characters. Operators are not token types of
their own: whether a character is a binary operator is decided by the
session's precedence table at parse time.

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of all token types in Kaleido."""

    EOF = auto()                    # End of input (repeats once reached)

    # Commands
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Primary
    IDENTIFIER = auto()             # foo, x1
    NUMBER = auto()                 # 1, 4.5, 1.2.3 (lenient)

    # Anything else: operators, parentheses, comma, semicolon...
    CHAR = auto()


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting; offsets count characters read from the stream.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    ``value`` carries the semantic payload: identifier text, the float for
    numbers, the character itself for CHAR tokens, None otherwise.
    """
    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    def is_char(self, char: str) -> bool:
        """Check if this is the single-character token ``char``."""
        return self.type == TokenType.CHAR and self.value == char

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER

    @property
    def is_keyword(self) -> bool:
        return self.type in KEYWORDS.values()


KEYWORDS = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}

# C isspace(): space, \t, \n, \v, \f, \r
WHITESPACE = frozenset(" \t\n\v\f\r")

LINE_TERMINATORS = frozenset("\n\r")
