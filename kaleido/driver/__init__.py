"""
Kaleido Driver Package

The read-eval-print loop that ties lexer, parser and backend together.

Author: xwest
"""

from .session import Session, PROMPT

__all__ = ["Session", "PROMPT"]
