"""
Test suite for the Kaleido lexer.

Tests cover:
- Keywords, identifiers, numbers and single-character tokens
- Comment skipping
- Lenient number conversion
- End of input behaviour
- Source locations

Author: xwest
"""

import io
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleido.lexer.lexer import Lexer, lenient_float, tokenize_string
from kaleido.lexer.tokens import TokenType


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _types(self, source: str):
        return [token.type for token in tokenize_string(source)]

    def test_keywords_and_identifiers(self):
        """def and extern are keywords, everything else alphanumeric is a name."""
        tokens = tokenize_string("def extern define x1 Extern")

        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.DEF, TokenType.EXTERN, TokenType.IDENTIFIER,
             TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF]
        )
        self.assertEqual(tokens[2].value, "define")
        self.assertEqual(tokens[3].value, "x1")
        self.assertTrue(tokens[0].is_keyword)
        self.assertTrue(tokens[4].is_identifier)

    def test_identifier_stops_at_non_alphanumeric(self):
        tokens = tokenize_string("foo_bar")

        self.assertEqual(tokens[0].value, "foo")
        self.assertTrue(tokens[1].is_char('_'))
        self.assertEqual(tokens[2].value, "bar")

    def test_numbers(self):
        tokens = tokenize_string("1 4.5 .5 10.")

        values = [t.value for t in tokens if t.type == TokenType.NUMBER]
        self.assertEqual(values, [1.0, 4.5, 0.5, 10.0])
        self.assertEqual(tokens[1].lexeme, "4.5")

    def test_lenient_number_with_several_dots(self):
        """1.2.3 is one number token converted from its longest valid prefix."""
        tokens = tokenize_string("1.2.3")

        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].lexeme, "1.2.3")
        self.assertEqual(tokens[0].value, 1.2)

    def test_lenient_float(self):
        self.assertEqual(lenient_float("42"), 42.0)
        self.assertEqual(lenient_float("1.2.3"), 1.2)
        self.assertEqual(lenient_float("1..5"), 1.0)
        self.assertEqual(lenient_float("."), 0.0)
        self.assertEqual(lenient_float(".."), 0.0)
        self.assertEqual(lenient_float(".25"), 0.25)

    def test_number_then_identifier(self):
        tokens = tokenize_string("2x")

        self.assertEqual(tokens[0].value, 2.0)
        self.assertEqual(tokens[1].value, "x")

    def test_char_tokens(self):
        tokens = tokenize_string("(a+b)*c;")

        chars = [t.value for t in tokens if t.type == TokenType.CHAR]
        self.assertEqual(chars, ['(', '+', ')', '*', ';'])
        self.assertTrue(tokens[0].is_char('('))
        self.assertFalse(tokens[1].is_char('('))

    def test_comment_is_skipped(self):
        """'# comment\\n1' lexes to a single number."""
        tokens = tokenize_string("# comment\n1")

        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].value, 1.0)
        self.assertEqual(tokens[1].type, TokenType.EOF)

    def test_many_comment_lines(self):
        """Long runs of comment lines are skipped without recursing per line."""
        lexer = Lexer("# line\n" * 5000 + "1")

        token = lexer.next_token()
        self.assertEqual(token.type, TokenType.NUMBER)
        self.assertEqual(token.location.line, 5001)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_comment_until_end_of_input(self):
        self.assertEqual(self._types("1 # trailing"), [TokenType.NUMBER, TokenType.EOF])
        self.assertEqual(self._types("# only a comment"), [TokenType.EOF])

    def test_consecutive_comments(self):
        self.assertEqual(
            self._types("# one\r# two\n\n  x"),
            [TokenType.IDENTIFIER, TokenType.EOF]
        )

    def test_whitespace_only(self):
        self.assertEqual(self._types(" \t\n\v\f\r"), [TokenType.EOF])
        self.assertEqual(self._types(""), [TokenType.EOF])

    def test_eof_repeats(self):
        """Once the input is exhausted every call returns EOF."""
        lexer = Lexer("x")

        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_reads_from_stream(self):
        lexer = Lexer(io.StringIO("extern sin(x);"))

        types = [token.type for token in lexer]
        self.assertEqual(types[:2], [TokenType.EXTERN, TokenType.IDENTIFIER])
        self.assertEqual(types[-1], TokenType.EOF)

    def test_lexer_reads_lazily(self):
        """A token is produced without reading the rest of the stream."""
        stream = io.StringIO("def foo")
        lexer = Lexer(stream)

        self.assertEqual(lexer.next_token().type, TokenType.DEF)
        # 'def' plus the character after it
        self.assertEqual(stream.tell(), 4)

    def test_locations(self):
        tokens = tokenize_string("def f(x)\n  x*2", filename="test.kal")

        self.assertEqual(tokens[0].location.filename, "test.kal")
        self.assertEqual((tokens[0].location.line, tokens[0].location.column), (1, 1))
        self.assertEqual((tokens[1].location.line, tokens[1].location.column), (1, 5))
        x = tokens[5]
        self.assertEqual(x.value, "x")
        self.assertEqual((x.location.line, x.location.column), (2, 3))
        self.assertEqual(str(x.location), "test.kal:2:3")


if __name__ == '__main__':
    unittest.main()
