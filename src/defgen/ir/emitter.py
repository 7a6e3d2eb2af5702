"""TypeScript emitter: lowered definitions → source text.

A plain tree walk. All shape decisions (which fields exist, which lists are
deferred, which registrations are split out) were made during lowering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .emitter_exprs import _ExprEmitterMixin
from .nodes import IRExpr, IRExprStmt, IRIsolatedSideEffect, IRStmt, IRType

if TYPE_CHECKING:
    from ..lower.core import LoweringResult


class Emitter(_ExprEmitterMixin):
    """Renders IR to TypeScript-flavoured text.

    Runtime modules are imported as namespaces (`i0`, `i1`, ...) in the
    order they are first referenced.
    """

    def __init__(self, *, emit_types: bool = True):
        self.emit_types = emit_types
        self._aliases: dict[str, str] = {}

    def emit(self, units: Iterable[tuple[str, LoweringResult]]) -> str:
        """Emit a complete source file for the given (name, result) units."""
        self._aliases = {}
        body: list[str] = []
        for name, result in units:
            body.extend(self._unit_lines(name, result))
        header = [f'import * as {alias} from "{module}";'
                  for module, alias in self._aliases.items()]
        if header:
            header.append("")
        return "\n".join(header + body) + "\n"

    def render_unit(self, name: str, result: LoweringResult) -> str:
        """One definition constant followed by its auxiliary statements, no imports."""
        return "\n".join(self._unit_lines(name, result))

    # --- Single-node rendering ---

    def render_expr(self, expr: IRExpr) -> str:
        return self._expr(expr)

    def render_type(self, type_: IRType) -> str:
        return self._type(type_)

    def render_stmt(self, stmt: IRStmt) -> str:
        return self._stmt(stmt)

    @property
    def imports(self) -> dict[str, str]:
        """Module specifier → namespace alias, in first-use order."""
        return dict(self._aliases)

    # --- Internals ---

    def _unit_lines(self, name: str, result: LoweringResult) -> list[str]:
        expr = self._expr(result.expression)
        if self.emit_types and result.type is not None:
            lines = [f"export const {name}: {self._type(result.type)} = {expr};"]
        else:
            lines = [f"export const {name} = {expr};"]
        lines.extend(self._stmt(stmt) for stmt in result.statements)
        return lines

    def _alias_for(self, module: str) -> str:
        alias = self._aliases.get(module)
        if alias is None:
            alias = f"i{len(self._aliases)}"
            self._aliases[module] = alias
        return alias

    def _stmt(self, stmt: IRStmt) -> str:
        if isinstance(stmt, IRExprStmt):
            return f"{self._expr(stmt.expr)};"

        elif isinstance(stmt, IRIsolatedSideEffect):
            return f"(function () {{ {self._stmt(stmt.stmt)} }})();"

        return f"/* unknown stmt: {type(stmt).__name__} */"
