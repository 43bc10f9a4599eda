"""
Semantic error handling for the Kaleido backend.

Semantic errors are found while generating code: names that do not resolve,
calls with the wrong number of arguments, operators without a lowering and
attempts to give a function a second body. Like syntax errors they are
reported and turned into a None result, never raised.

Author: xwest
"""

from typing import Optional
from enum import Enum

from ..diagnostics import Diagnostic


class SemanticErrorKind(Enum):
    """The ways code generation for a statement can fail."""
    UNKNOWN_VARIABLE = "S001"
    UNKNOWN_FUNCTION = "S002"
    ARITY_MISMATCH = "S003"
    UNSUPPORTED_OPERATOR = "S004"
    REDEFINITION = "S005"
    BODY_CODEGEN_FAILED = "S006"


# Semantic error codes for categorization
SEMANTIC_ERROR_CODES = {
    "S001": "Unknown variable",
    "S002": "Unknown function",
    "S003": "Argument count mismatch",
    "S004": "Unsupported binary operator",
    "S005": "Function redefinition",
    "S006": "Function body code generation failed",
}


class SemanticError:
    """A backend-reported error tied to one statement."""

    def __init__(self, kind: SemanticErrorKind, message: str,
                 help_text: Optional[str] = None):
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            severity="error",
            code=kind.value,
            help_text=help_text
        )

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)

    def __repr__(self) -> str:
        return f"SemanticError({self.kind.name}, {self.message!r})"


# Helper functions for creating common semantic errors

def create_unknown_variable_error(name: str) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.UNKNOWN_VARIABLE,
        "Unknown variable name",
        help_text=f"'{name}' is not a parameter of the enclosing function"
    )


def create_unknown_function_error(name: str) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.UNKNOWN_FUNCTION,
        "Unknown function referenced",
        help_text=f"'{name}' has not been defined or declared with extern"
    )


def create_unresolved_symbol_error(name: str) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.UNKNOWN_FUNCTION,
        f"Unresolved external function '{name}'",
        help_text="declared with extern but neither defined nor found in the process"
    )


def create_arity_mismatch_error(name: str, expected: int, got: int) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.ARITY_MISMATCH,
        "Incorrect # arguments passed",
        help_text=f"'{name}' takes {expected} argument(s), {got} given"
    )


def create_redeclaration_error(name: str, expected: int, got: int) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.ARITY_MISMATCH,
        "Function redeclared with a different number of arguments",
        help_text=f"'{name}' was declared with {expected} argument(s), now {got}"
    )


def create_unsupported_operator_error(op: str) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.UNSUPPORTED_OPERATOR,
        "invalid binary operator",
        help_text=f"no code generation for '{op}'"
    )


def create_redefinition_error(name: str) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.REDEFINITION,
        "Function cannot be redefined",
        help_text=f"'{name}' already has a body"
    )


def create_body_codegen_error(name: str, reason: Optional[str] = None) -> SemanticError:
    return SemanticError(
        SemanticErrorKind.BODY_CODEGEN_FAILED,
        f"Error generating body of '{name}'",
        help_text=reason
    )
