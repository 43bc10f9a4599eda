"""
Kaleido Backend Package.

Contains the code generation interface used by the session driver and the
LLVM implementation of it.

Author: xwest
"""

from .base import CodegenBackend
from .llvm_backend import LLVMBackend
from .errors import SemanticError, SemanticErrorKind, SEMANTIC_ERROR_CODES

__all__ = [
    'CodegenBackend', 'LLVMBackend',
    'SemanticError', 'SemanticErrorKind', 'SEMANTIC_ERROR_CODES',
]
