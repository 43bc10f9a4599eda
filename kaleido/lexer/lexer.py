"""
Kaleido Lexer - turns a character stream into tokens, one at a time.

Unlike a batch tokenizer the lexer never looks at more input than it needs:
the REPL has to be able to act on a statement before the user has typed the
next one. State is a single character of pushback (``last_char``).

xwest
"""

import re
from io import StringIO
from typing import List, TextIO, Union

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, WHITESPACE, LINE_TERMINATORS
)


# Longest prefix strtod() would accept out of a run of digits and dots.
_DECIMAL_PREFIX = re.compile(r'\d*(?:\.\d*)?')


def lenient_float(text: str) -> float:
    """
    Convert a run of digits and '.' the way C ``strtod`` does.

    Only the longest leading decimal literal is converted and the remainder
    is ignored, so ``"1.2.3"`` gives ``1.2``. A run without any digit
    (``"."``, ``".."``) converts to ``0.0``. Python's ``float`` is used on
    the prefix, which is locale independent.
    """
    prefix = _DECIMAL_PREFIX.match(text).group(0)
    if not any(ch.isdigit() for ch in prefix):
        return 0.0
    return float(prefix)


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_ascii_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


class Lexer:
    """
    Kaleido lexical analyzer.

    Reads from a text stream with ``read(1)``; plain strings are wrapped in
    a StringIO. ``next_token()`` is the only entry point the parser needs.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<stdin>"):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a readable text stream such as sys.stdin
            filename: Name used in token locations
        """
        if isinstance(source, str):
            source = StringIO(source)
        self.stream = source
        self.filename = filename

        # Position of the next character to be read from the stream
        self.line = 1
        self.column = 1
        self.offset = 0

        # One character of pushback, primed with whitespace so the first
        # call reads from the stream. '' means end of input.
        self.last_char = ' '
        self.last_location = SourceLocation(filename, 1, 0, -1)

    def next_token(self) -> Token:
        """Return the next token from the stream."""
        self._skip_blank()
        start = self.last_location

        # identifier: [a-zA-Z][a-zA-Z0-9]*
        if _is_ascii_alpha(self.last_char):
            chars = [self.last_char]
            while _is_ascii_alnum(self._read_char()):
                chars.append(self.last_char)
            text = ''.join(chars)
            if text in KEYWORDS:
                return Token(KEYWORDS[text], text, None, start)
            return Token(TokenType.IDENTIFIER, text, text, start)

        # number: [0-9.]+
        if _is_ascii_digit(self.last_char) or self.last_char == '.':
            chars = []
            while _is_ascii_digit(self.last_char) or self.last_char == '.':
                chars.append(self.last_char)
                self._read_char()
            text = ''.join(chars)
            return Token(TokenType.NUMBER, text, lenient_float(text), start)

        if self.last_char == '':
            return Token(TokenType.EOF, "", None, self.last_location)

        char = self.last_char
        self._read_char()
        return Token(TokenType.CHAR, char, char, start)

    def _skip_blank(self):
        """Skip whitespace and '#' comments up to the next token or end of input."""
        while True:
            while self.last_char in WHITESPACE:
                self._read_char()
            if self.last_char != '#':
                return
            # comment until end of line
            while self._read_char() != '' and self.last_char not in LINE_TERMINATORS:
                pass

    def _read_char(self) -> str:
        """Read one character into ``last_char``, tracking its location."""
        char = self.stream.read(1)
        self.last_char = char
        self.last_location = SourceLocation(self.filename, self.line, self.column, self.offset)
        if char == '':
            return char
        self.offset += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def __iter__(self):
        """Yield tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a whole source string.

    Returns:
        List of tokens, EOF last
    """
    return list(Lexer(source, filename))
