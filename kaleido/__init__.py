"""
Kaleido Compiler Package

An interactive front end for Kaleido, a tiny expression language in which
every value is a double. Statements are read from a stream one at a time,
parsed with a precedence-climbing parser and JIT compiled through LLVM.

Architecture:
    kaleido/
    ├── lexer/           # Incremental tokenization
    ├── parser/          # AST and precedence-climbing parser
    ├── backend/         # Code generation interface + LLVM/MCJIT backend
    ├── driver/          # REPL session loop
    ├── context.py       # Per-session state
    └── diagnostics.py   # Error records

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .context import SessionContext
from .lexer import Lexer
from .parser import Parser

__all__ = [
    # Core classes
    "SessionContext",
    "Lexer",
    "Parser",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
