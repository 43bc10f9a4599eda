"""
Command line entry point for the Kaleido REPL.

Reads the program from standard input, one statement at a time, and writes
prompts, acknowledgements, results and errors to standard error.

Usage:
    kaleido                 # interactive
    kaleido < program.kal   # batch

Author: xwest
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .context import SessionContext
from .backend.llvm_backend import LLVMBackend
from .driver.session import Session


def main(argv: Optional[List[str]] = None) -> int:
    """Run one session over stdin; errors are recovered, so the status is 0."""
    parser = argparse.ArgumentParser(
        prog="kaleido",
        description=f"Kaleido {__version__} interactive compiler (reads stdin)",
    )
    parser.parse_args(argv)

    context = SessionContext()
    backend = LLVMBackend(context)
    session = Session(backend, sys.stdin, context)
    session.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
