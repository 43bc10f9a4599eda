"""
Diagnostic records shared by the Kaleido front end stages.

Both syntax errors (lexer/parser) and semantic errors (backend) end up as a
Diagnostic. Nothing here raises: stages hand diagnostics to whoever owns the
diagnostic stream and return a failure sentinel instead.

Author: xwest
"""

from typing import Optional
from dataclasses import dataclass

from .lexer.tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single human-readable message with an optional source location."""
    message: str
    location: Optional[SourceLocation] = None
    severity: str = "error"  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None

    def brief(self) -> str:
        """The one-line form the REPL prints, e.g. ``Error: expected ')'``."""
        return f"{self.severity.capitalize()}: {self.message}"

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"
        if self.help_text:
            result += f"  help: {self.help_text}\n"
        return result
