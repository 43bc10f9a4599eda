"""
Code generation interface consumed by the Kaleido session driver.

A backend turns AST pieces into handles of its own choosing and reports
success or failure. Failure is always a None result with the reason
recorded in ``errors`` and reported to the session.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..context import SessionContext
from ..parser.ast_nodes import (
    Expression, NumberExpr, VariableExpr, BinaryExpr, CallExpr, Prototype
)
from .errors import SemanticError


class CodegenBackend(ABC):
    """Abstract backend collaborator."""

    def __init__(self, context: Optional[SessionContext] = None):
        self.context = context if context is not None else SessionContext()
        self.errors: List[SemanticError] = []

    def bind_session(self, context: SessionContext):
        """Share the session's prototype table and diagnostic stream."""
        self.context = context

    # Expression lowering

    def emit_expression(self, expr: Expression) -> Optional[Any]:
        """Lower an expression by dispatching on its node kind."""
        if isinstance(expr, NumberExpr):
            return self.emit_constant(expr.value)
        elif isinstance(expr, VariableExpr):
            return self.emit_variable_ref(expr.name)
        elif isinstance(expr, BinaryExpr):
            return self._emit_binary_chain(expr)
        elif isinstance(expr, CallExpr):
            return self.emit_call(expr.callee, expr.args)
        raise TypeError(f"not an expression node: {expr!r}")

    def _emit_binary_chain(self, expr: BinaryExpr) -> Optional[Any]:
        """
        Lower a binary expression by walking down its left operands.

        Operator chains like ``1+2+3+...`` nest to the left as deep as they
        are long, so they are lowered with a loop instead of one recursive
        call per operator. Both operands are always lowered, even when the
        left one failed, so every error in the chain is reported.
        """
        spine = []
        node = expr
        while isinstance(node, BinaryExpr):
            spine.append(node)
            node = node.lhs

        left = self.emit_expression(node)
        for binary in reversed(spine):
            right = self.emit_expression(binary.rhs)
            if left is None or right is None:
                left = None
                continue
            left = self.emit_binary(binary.op, left, right)
        return left

    @abstractmethod
    def emit_constant(self, value: float) -> Any:
        """Numeric literal."""

    @abstractmethod
    def emit_variable_ref(self, name: str) -> Optional[Any]:
        """Parameter of the function currently being defined."""

    @abstractmethod
    def emit_binary(self, op: str, left: Any, right: Any) -> Optional[Any]:
        """Binary operator applied to two lowered operands."""

    @abstractmethod
    def emit_call(self, callee: str, args: Sequence[Expression]) -> Optional[Any]:
        """Call of a known function; arguments are still AST nodes."""

    # Functions

    @abstractmethod
    def declare_prototype(self, prototype: Prototype) -> Optional[Any]:
        """Declaration-only code generation for a prototype."""

    @abstractmethod
    def define_function(self, prototype: Prototype, body: Expression) -> Optional[Any]:
        """Materialize a function with a body."""

    @abstractmethod
    def compile_and_run_unit(self, function: Any) -> Optional[float]:
        """Compile the current unit, run ``function`` once and release the unit."""

    def describe(self, handle: Any) -> str:
        """Printable form of a function handle for acknowledgements."""
        return str(handle)

    def _fail(self, error: SemanticError) -> None:
        """Record and report a semantic error; always returns None."""
        self.errors.append(error)
        self.context.report(error.diagnostic)
        return None
