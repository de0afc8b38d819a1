"""
Evaluation Context

Renders expression handles to WGSL source text. A context caches the text of
every handle it renders, so an expression shared by several parents is
rendered once and then referenced by the same text everywhere.
"""

from typing import Dict, Optional, Protocol, Set
import logging

from ..expr.errors import ExprError
from ..expr.module import ExprHandle, Module

logger = logging.getLogger(__name__)


class EvalContext(Protocol):
    """Protocol for objects rendering expressions to shader code"""

    def eval(self, module: Module, handle: ExprHandle) -> str:
        """
        Render an expression to shader code.

        Args:
            module: Module owning the expression
            handle: Expression to render

        Returns:
            Shader code of a value expression
        """
        ...


class ShaderWriter:
    """
    Codegen context for a single shader generation pass.

    The writer keeps:
    - a cache from expression handle to rendered text (or to the name of a
      local variable holding the value),
    - main_code, the statements emitted so far.

    A writer is bound to the module it first renders from and must not be
    reused for another pass: its cache would merge unrelated expressions.

    Example usage:
        writer = ShaderWriter()
        pos = writer.eval(module, position_handle)          # "particle.position"
        step = writer.eval_to_var(module, step_handle)      # "var0"
        writer.push_stmt(f"particle.position = {pos} + {step};")
        print(writer.main_code)
    """

    def __init__(self, var_prefix: str = "var"):
        self.var_prefix = var_prefix
        self.main_code = ""
        self._module: Optional[Module] = None
        self._cache: Dict[ExprHandle, str] = {}
        self._vars: Dict[ExprHandle, str] = {}
        self._var_names: Set[str] = set()
        self._reserved: Set[str] = set()
        self._var_counter = 0
        self.rendered_count = 0

    def eval(self, module: Module, handle: ExprHandle) -> str:
        """
        Render an expression to shader code.

        Each handle is rendered at most once per writer; later calls, direct
        or through a parent expression, return the cached text.

        Raises:
            ExprError: If the writer was already used with another module
            InvalidExprHandleError: If the handle is not from the module
        """
        self._bind_module(module)

        cached = self._cache.get(handle)
        if cached is not None:
            return cached

        # Post-order walk with an explicit stack; expression chains can be
        # far deeper than the interpreter recursion limit.
        stack = [handle]
        while stack:
            current = stack[-1]
            if current in self._cache:
                stack.pop()
                continue

            expr = module.get(current)
            pending = [child for child in expr.children() if child not in self._cache]
            if pending:
                stack.extend(reversed(pending))
                continue

            stack.pop()
            children_text = [self._cache[child] for child in expr.children()]
            self._cache[current] = expr.render(module, children_text)
            self.rendered_count += 1

        return self._cache[handle]

    def eval_to_var(
        self, module: Module, handle: ExprHandle, name: Optional[str] = None
    ) -> str:
        """
        Render an expression into a local variable.

        Emits "let <name> = <code>;" once. From then on the handle renders as
        the variable name, including inside parent expressions.

        Args:
            module: Module owning the expression
            handle: Expression to store
            name: Variable name (default: a fresh name from make_local_var())

        Returns:
            The variable name
        """
        existing = self._vars.get(handle)
        if existing is not None:
            return existing

        code = self.eval(module, handle)
        if name is None:
            name = self.make_local_var()
        elif name in self._reserved:
            self._reserved.discard(name)
        elif name in self._var_names:
            raise ExprError(f"Local variable already defined: {name}")
        self._var_names.add(name)
        self.push_stmt(f"let {name} = {code};")

        self._cache[handle] = name
        self._vars[handle] = name
        logger.debug(f"Bound expression {handle.id} to local '{name}'")
        return name

    def reserve_name(self, name: str) -> None:
        """
        Keep a variable name for a later explicit eval_to_var() or push_stmt().

        Generated names from make_local_var() never collide with reserved ones.
        A reserved name can be bound by eval_to_var() once.

        Raises:
            ExprError: If the name is already bound or reserved
        """
        if name in self._var_names:
            raise ExprError(f"Local variable already defined: {name}")
        self._var_names.add(name)
        self._reserved.add(name)

    def make_local_var(self) -> str:
        """Create a new unique local variable name"""
        while True:
            name = f"{self.var_prefix}{self._var_counter}"
            self._var_counter += 1
            if name not in self._var_names:
                return name

    def push_stmt(self, stmt: str) -> None:
        """Append a statement line to the main code"""
        self.main_code += f"{stmt}\n"

    def _bind_module(self, module: Module) -> None:
        if self._module is None:
            self._module = module
        elif self._module is not module:
            raise ExprError("ShaderWriter used with more than one module")


def to_wgsl_string(module: Module, handle: ExprHandle) -> str:
    """Render an expression with a fresh writer"""
    return ShaderWriter().eval(module, handle)
