"""
Per-session state for the Kaleido front end.

Everything that has to survive from one top-level statement to the next
lives here and is passed explicitly to the parser, the backend and the
driver. The precedence table is filled once when the context is created.

Author: xwest
"""

import sys
from typing import TYPE_CHECKING, Dict, List, Optional, TextIO
from dataclasses import dataclass, field

from .diagnostics import Diagnostic

if TYPE_CHECKING:
    from .parser.ast_nodes import Prototype


# 1 is the lowest precedence.
DEFAULT_PRECEDENCE = {
    '<': 10,
    '+': 20,
    '-': 20,
    '*': 40,
}

ANONYMOUS_FUNCTION_NAME = "__anon_expr"


@dataclass
class SessionContext:
    """State shared by all statements of one REPL session."""
    precedence: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_PRECEDENCE))
    known_prototypes: Dict[str, "Prototype"] = field(default_factory=dict)
    anonymous_name: str = ANONYMOUS_FUNCTION_NAME
    anonymous_count: int = 0
    stream: Optional[TextIO] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def precedence_of(self, char: str) -> int:
        """Precedence of a binary operator character, -1 if it is not one."""
        prec = self.precedence.get(char, 0)
        if prec <= 0:
            return -1
        return prec

    def remember(self, prototype: "Prototype"):
        """Record (or refresh) the latest prototype seen for a name."""
        self.known_prototypes[prototype.name] = prototype

    def lookup(self, name: str) -> Optional["Prototype"]:
        return self.known_prototypes.get(name)

    def next_anonymous_name(self) -> str:
        """
        Name for the next wrapped top-level expression.

        Each evaluation gets its own symbol so a released unit can never be
        confused with the next one inside the JIT.
        """
        self.anonymous_count += 1
        return f"{self.anonymous_name}{self.anonymous_count}"

    def is_anonymous(self, name: str) -> bool:
        return name.startswith(self.anonymous_name)

    def report(self, diagnostic: Diagnostic):
        """Keep a diagnostic and print its one-line form."""
        self.diagnostics.append(diagnostic)
        self.write(diagnostic.brief() + "\n")

    def write(self, text: str):
        """Write to the diagnostic stream (stderr unless overridden)."""
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(text)
        stream.flush()
