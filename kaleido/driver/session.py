"""
Kaleido session driver.

Runs one top-level statement at a time to completion: parse it, hand it to
the backend, print the outcome, then read the next one. The current token
decides what kind of statement comes next:

    EOF      end of the session
    ';'      ignored
    'def'    function definition
    'extern' external declaration
    other    expression, evaluated immediately

A statement that fails at either stage is reported and exactly one token is
skipped before the loop resumes. No attempt is made to find the next
statement boundary, so one bad statement can make the tokens after it parse
differently.

Author: xwest
"""

import sys
from typing import Any, List, Optional, TextIO, Union

from ..context import SessionContext
from ..diagnostics import Diagnostic
from ..lexer.lexer import Lexer
from ..lexer.tokens import TokenType
from ..parser.parser import Parser
from ..backend.base import CodegenBackend


PROMPT = "ready> "


class Session:
    """One interactive session over a single input stream."""

    def __init__(self, backend: CodegenBackend, source: Union[str, TextIO] = None,
                 context: Optional[SessionContext] = None,
                 stream: Optional[TextIO] = None):
        """
        Args:
            backend: Code generation collaborator
            source: Program text or stream, stdin by default
            context: Session state; a fresh one is created if omitted
            stream: Where prompts, acknowledgements and errors go
                (defaults to the context's stream, i.e. stderr)
        """
        self.context = context if context is not None else SessionContext()
        if stream is not None:
            self.context.stream = stream

        self.backend = backend
        self.backend.bind_session(self.context)

        if source is None:
            source = sys.stdin
        self.parser = Parser(Lexer(source), self.context)
        self.results: List[float] = []

    @property
    def errors(self) -> List[Diagnostic]:
        """Every diagnostic reported so far, in order."""
        return list(self.context.diagnostics)

    def run(self):
        """Drive the loop until end of input."""
        self.context.write(PROMPT)
        self.parser.advance()

        while True:
            self.context.write(PROMPT)
            token = self.parser.current_token
            if token.type == TokenType.EOF:
                return
            elif token.is_char(';'):
                self.parser.advance()  # ignore top-level semicolons
            elif token.type == TokenType.DEF:
                self.handle_definition()
            elif token.type == TokenType.EXTERN:
                self.handle_extern()
            else:
                self.handle_top_level_expression()

    def handle_definition(self) -> Optional[Any]:
        function = self.parser.parse_definition()
        if function is None:
            return self._recover()

        handle = self.backend.define_function(function.prototype, function.body)
        if handle is None:
            return self._recover()

        self._acknowledge("Read a function definition:", handle)
        return handle

    def handle_extern(self) -> Optional[Any]:
        prototype = self.parser.parse_extern()
        if prototype is None:
            return self._recover()

        handle = self.backend.declare_prototype(prototype)
        if handle is None:
            return self._recover()
        self.context.remember(prototype)

        self._acknowledge("Read extern: ", handle)
        return handle

    def handle_top_level_expression(self) -> Optional[float]:
        function = self.parser.parse_top_level_expr()
        if function is None:
            return self._recover()

        handle = self.backend.define_function(function.prototype, function.body)
        if handle is None:
            return self._recover()

        value = self.backend.compile_and_run_unit(handle)
        if value is None:
            return self._recover()

        self.results.append(value)
        self.context.write(f"Evaluated to {value:f}\n")
        return value

    def _acknowledge(self, title: str, handle: Any):
        self.context.write(f"{title}\n{self.backend.describe(handle).rstrip()}\n\n")

    def _recover(self) -> None:
        # Skip token for error recovery.
        self.parser.advance()
        return None
