"""
Abstract Syntax Tree node definitions for Kaleido.

The node set is closed: four expression kinds plus Prototype and Function.
Nodes are immutable value objects with structural equality, so a parsed
tree can be compared directly against an expected one. They carry no
behaviour of their own; the backend dispatches on their type.

Author: xwest
"""

from typing import Tuple, Union
from dataclasses import dataclass
from enum import Enum


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Expressions
    NUMBER = "Number"
    VARIABLE = "Variable"
    BINARY = "Binary"
    CALL = "Call"

    # Top-level
    PROTOTYPE = "Prototype"
    FUNCTION = "Function"


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class NumberExpr:
    """Numeric literal like ``1.0``."""
    value: float

    node_type = ASTNodeType.NUMBER

    def children(self) -> Tuple['Expression', ...]:
        return ()


@dataclass(frozen=True)
class VariableExpr:
    """Reference to a parameter, like ``a``."""
    name: str

    node_type = ASTNodeType.VARIABLE

    def children(self) -> Tuple['Expression', ...]:
        return ()


@dataclass(frozen=True)
class BinaryExpr:
    """Binary operator application; ``op`` is a single character."""
    op: str
    lhs: 'Expression'
    rhs: 'Expression'

    node_type = ASTNodeType.BINARY

    def children(self) -> Tuple['Expression', ...]:
        return (self.lhs, self.rhs)


@dataclass(frozen=True)
class CallExpr:
    """Function call ``callee(args...)``."""
    callee: str
    args: Tuple['Expression', ...] = ()

    node_type = ASTNodeType.CALL

    def children(self) -> Tuple['Expression', ...]:
        return self.args


Expression = Union[NumberExpr, VariableExpr, BinaryExpr, CallExpr]

EXPRESSION_TYPES = (NumberExpr, VariableExpr, BinaryExpr, CallExpr)


# ============================================================================
# Top-level nodes
# ============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    A function's name and parameter names, without a body.

    Parameter names are kept in declaration order; duplicates are allowed.
    """
    name: str
    params: Tuple[str, ...] = ()

    node_type = ASTNodeType.PROTOTYPE

    @property
    def arity(self) -> int:
        return len(self.params)

    def __str__(self) -> str:
        return f"{self.name}({' '.join(self.params)})"


@dataclass(frozen=True)
class Function:
    """A function definition: a prototype plus a single body expression."""
    prototype: Prototype
    body: Expression

    node_type = ASTNodeType.FUNCTION

    @property
    def name(self) -> str:
        return self.prototype.name

    def children(self) -> Tuple[Expression, ...]:
        return (self.body,)
