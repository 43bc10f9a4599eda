"""
LLVM Backend for Kaleido.

Generates LLVM IR with llvmlite and runs it on an MCJIT execution engine.
Every value is an IEEE double.

Compilation units: code is emitted into one open ``llvmlite.ir.Module`` at a
time. A completed named definition moves its unit into the engine for good
and a fresh unit is opened. An anonymous top-level expression gets the same
treatment, except that its unit is removed from the engine again right
after the single call, so nothing of it survives into later statements.
Functions living in earlier units are reached by re-declaring them from the
session's prototype table.

Author: xwest
"""

import ctypes
from typing import Dict, Optional, Sequence, Set

import llvmlite.binding as llvm
import llvmlite.ir as ll

from ..context import SessionContext
from ..parser.ast_nodes import Expression, Prototype
from .base import CodegenBackend
from .errors import (
    create_unknown_variable_error, create_unknown_function_error,
    create_unresolved_symbol_error, create_arity_mismatch_error,
    create_unsupported_operator_error, create_redefinition_error,
    create_redeclaration_error,
    create_body_codegen_error
)


class LLVMBackend(CodegenBackend):
    """
    LLVM backend for Kaleido.

    Handles:
    - IR generation for expressions, prototypes and function bodies
    - Function-level optimization passes
    - JIT compilation and execution of anonymous expressions
    """

    def __init__(self, context: Optional[SessionContext] = None,
                 target_triple: Optional[str] = None, optimization_level: int = 2):
        """
        Initialize the LLVM backend.

        Args:
            context: Session state; a private one is created if omitted
            target_triple: Target triple (e.g., "x86_64-pc-linux-gnu"),
                defaults to the host
            optimization_level: 0 disables the function pass pipeline
        """
        super().__init__(context)

        llvm.initialize_native_target()
        llvm.initialize_native_asmprinter()

        if target_triple:
            target = llvm.Target.from_triple(target_triple)
        else:
            target = llvm.Target.from_default_triple()
        self.target_machine = target.create_target_machine()
        self.target_triple = self.target_machine.triple
        self.optimization_level = optimization_level

        # The engine needs a module to start with; creating it also makes
        # the symbols of the running process (libm etc.) resolvable.
        self.engine = llvm.create_mcjit_compiler(llvm.parse_assembly(""), self.target_machine)

        self.double = ll.DoubleType()
        self.defined: Set[str] = set()
        self.unit_count = 0

        self.module: Optional[ll.Module] = None
        self.builder: Optional[ll.IRBuilder] = None
        self.named_values: Dict[str, ll.Argument] = {}
        self.called: Set[str] = set()
        self._new_unit()

    def _new_unit(self):
        """Open a fresh compilation unit."""
        self.unit_count += 1
        self.module = ll.Module(name=f"kaleido_unit{self.unit_count}")
        self.module.triple = self.target_triple
        self.module.data_layout = str(self.target_machine.target_data)
        self.builder = None
        self.named_values = {}
        self.called = set()

    # Expressions

    def emit_constant(self, value: float) -> ll.Constant:
        return ll.Constant(self.double, float(value))

    def emit_variable_ref(self, name: str) -> Optional[ll.Value]:
        value = self.named_values.get(name)
        if value is None:
            return self._fail(create_unknown_variable_error(name))
        return value

    def emit_binary(self, op: str, left: ll.Value, right: ll.Value) -> Optional[ll.Value]:
        if op == '+':
            return self.builder.fadd(left, right, name="addtmp")
        elif op == '-':
            return self.builder.fsub(left, right, name="subtmp")
        elif op == '*':
            return self.builder.fmul(left, right, name="multmp")
        elif op == '<':
            cmp = self.builder.fcmp_unordered('<', left, right, name="cmptmp")
            # Convert bool 0/1 to double 0.0 or 1.0
            return self.builder.uitofp(cmp, self.double, name="booltmp")
        return self._fail(create_unsupported_operator_error(op))

    def emit_call(self, callee: str, args: Sequence[Expression]) -> Optional[ll.Value]:
        function = self._get_function(callee)
        if function is None:
            return self._fail(create_unknown_function_error(callee))

        if len(function.args) != len(args):
            return self._fail(create_arity_mismatch_error(callee, len(function.args), len(args)))

        values = []
        for arg in args:
            value = self.emit_expression(arg)
            if value is None:
                return None
            values.append(value)

        self.called.add(callee)
        return self.builder.call(function, values, name="calltmp")

    def _get_function(self, name: str) -> Optional[ll.Function]:
        """Find ``name`` in the current unit, re-declaring it if it lives elsewhere."""
        function = self.module.globals.get(name)
        if isinstance(function, ll.Function):
            return function

        prototype = self.context.lookup(name)
        if prototype is not None:
            return self._declare(prototype)
        return None

    # Functions

    def declare_prototype(self, prototype: Prototype) -> Optional[ll.Function]:
        """
        Emit ``declare double @name(double, ...)`` into the current unit.

        A name keeps the arity it was first introduced with.
        """
        known = self.context.lookup(prototype.name)
        if known is not None and known.arity != prototype.arity:
            return self._fail(create_redeclaration_error(
                prototype.name, known.arity, prototype.arity))

        existing = self.module.globals.get(prototype.name)
        if isinstance(existing, ll.Function):
            if len(existing.args) != prototype.arity:
                return self._fail(create_redeclaration_error(
                    prototype.name, len(existing.args), prototype.arity))
            return existing
        return self._declare(prototype)

    def _declare(self, prototype: Prototype) -> ll.Function:
        func_type = ll.FunctionType(self.double, [self.double] * prototype.arity)
        function = ll.Function(self.module, func_type, name=prototype.name)
        for arg, param in zip(function.args, prototype.params):
            arg.name = param
        return function

    def define_function(self, prototype: Prototype, body: Expression) -> Optional[ll.Function]:
        """
        Give ``prototype`` a body.

        Named functions are compiled into the engine immediately and can
        never be given another body. Anonymous ones stay in the current unit
        until compile_and_run_unit().
        """
        name = prototype.name
        anonymous = self.context.is_anonymous(name)

        existing = self.module.globals.get(name)
        if name in self.defined or (isinstance(existing, ll.Function) and not existing.is_declaration):
            return self._fail(create_redefinition_error(name))

        function = self.declare_prototype(prototype)
        if function is None:
            return None

        # Nothing with a body is pending in the unit at this point.
        self.called = set()
        block = function.append_basic_block(name="entry")
        self.builder = ll.IRBuilder(block)

        # First binding wins when a parameter name is repeated.
        self.named_values = {}
        for param, arg in zip(prototype.params, function.args):
            self.named_values.setdefault(param, arg)

        result = self.emit_expression(body)
        if result is None:
            # The cause has been reported already; only keep the record.
            self.errors.append(create_body_codegen_error(name))
            return self._discard_unit()

        self.builder.ret(result)
        self.builder = None

        if anonymous:
            return function

        if self._materialize_unit() is None:
            return self._discard_unit()

        self.context.remember(prototype)
        self.defined.add(name)
        self._new_unit()
        return function

    def _discard_unit(self) -> None:
        """
        Drop a failed definition together with its unit.

        The unit held nothing but declarations besides the failed function,
        and those are re-created from the prototype table when needed, so a
        failed def leaves no trace behind.
        """
        self._new_unit()
        return None

    def compile_and_run_unit(self, function: ll.Function) -> Optional[float]:
        """Run an anonymous function once, then drop its unit from the engine."""
        llvm_module = self._materialize_unit()
        self._new_unit()
        if llvm_module is None:
            return None

        try:
            address = self.engine.get_function_address(function.name)
            cfunc = ctypes.CFUNCTYPE(ctypes.c_double)(address)
            return float(cfunc())
        finally:
            self.engine.remove_module(llvm_module)

    def _materialize_unit(self) -> Optional['llvm.ModuleRef']:
        """Verify, optimize and hand the current unit to the engine."""
        for name in sorted(self.called):
            if not self._is_resolvable(name):
                return self._fail(create_unresolved_symbol_error(name))

        try:
            llvm_module = llvm.parse_assembly(str(self.module))
            llvm_module.verify()
        except RuntimeError as e:
            return self._fail(create_body_codegen_error(self.module.name, str(e)))

        self.optimize_module(llvm_module)
        self.engine.add_module(llvm_module)
        self.engine.finalize_object()
        return llvm_module

    def _is_resolvable(self, name: str) -> bool:
        """Whether a function called from the current unit will link."""
        function = self.module.globals.get(name)
        if isinstance(function, ll.Function) and not function.is_declaration:
            return True
        if name in self.defined:
            return True
        return llvm.address_of_symbol(name) is not None

    def optimize_module(self, llvm_module: 'llvm.ModuleRef') -> 'llvm.ModuleRef':
        """
        Run the function simplification passes over every defined function.

        Peephole (instcombine), reassociate, GVN and CFG simplification.
        """
        if self.optimization_level <= 0:
            return llvm_module

        pto = llvm.create_pipeline_tuning_options(speed_level=min(self.optimization_level, 3))
        pass_builder = llvm.create_pass_builder(self.target_machine, pto)
        fpm = llvm.create_new_function_pass_manager()
        fpm.add_instruction_combine_pass()
        fpm.add_reassociate_pass()
        fpm.add_new_gvn_pass()
        fpm.add_simplify_cfg_pass()

        for function in llvm_module.functions:
            if not function.is_declaration:
                fpm.run(function, pass_builder)
        return llvm_module

    def print_llvm_ir(self) -> str:
        """The current unit's IR as a string."""
        return str(self.module)
