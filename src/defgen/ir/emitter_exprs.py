"""Expression and type rendering for the TypeScript emitter."""

from __future__ import annotations

import json
import re

from .nodes import (
    IRArray,
    IRBinOp,
    IRCall,
    IRDeferred,
    IRExpr,
    IRExpressionType,
    IRExternalRef,
    IRGuardedCall,
    IRLiteral,
    IRNoneType,
    IRObject,
    IRRawExpr,
    IRType,
    IRTypeof,
    IRVar,
)

_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

# Higher binds tighter
_PRECEDENCE = {
    "||": 1, "??": 1,
    "&&": 2,
    "===": 3, "!==": 3, "==": 3, "!=": 3,
    "<": 4, "<=": 4, ">": 4, ">=": 4, "instanceof": 4, "in": 4,
    "+": 5, "-": 5,
    "*": 6, "/": 6, "%": 6,
}


class _ExprEmitterMixin:
    """Mixin providing expression and type rendering for Emitter.

    External references are rendered through _alias_for(), which the
    host class provides.
    """

    def _expr(self, expr: IRExpr) -> str:
        if expr is None:
            return "/* null expr */"

        if isinstance(expr, IRLiteral):
            return self._literal(expr.value)

        elif isinstance(expr, IRVar):
            return expr.name

        elif isinstance(expr, IRExternalRef):
            return f"{self._alias_for(expr.module)}.{expr.name}"

        elif isinstance(expr, IRRawExpr):
            return expr.text

        elif isinstance(expr, IRArray):
            return "[" + ", ".join(self._expr(e) for e in expr.entries) + "]"

        elif isinstance(expr, IRObject):
            if not expr.entries:
                return "{}"
            parts = [f"{self._key(k)}: {self._expr(v)}" for k, v in expr.entries]
            return "{" + ", ".join(parts) + "}"

        elif isinstance(expr, IRCall):
            callee = self._expr(expr.callee)
            if isinstance(expr.callee, (IRDeferred, IRGuardedCall, IRBinOp)):
                callee = f"({callee})"
            args = ", ".join(self._expr(a) for a in expr.args)
            prefix = "/*@__PURE__*/ " if expr.pure else ""
            return f"{prefix}{callee}({args})"

        elif isinstance(expr, IRBinOp):
            prec = _PRECEDENCE.get(expr.op, 0)
            return f"{self._operand(expr.left, prec)} {expr.op} {self._operand(expr.right, prec)}"

        elif isinstance(expr, IRTypeof):
            return f"typeof {self._expr(expr.expr)}"

        elif isinstance(expr, IRDeferred):
            return f"function () {{ return {self._expr(expr.expr)}; }}"

        elif isinstance(expr, IRGuardedCall):
            return f"({self._expr(expr.condition)}) && {self._expr(expr.call)}"

        return f"/* unknown expr: {type(expr).__name__} */"

    def _type(self, type_: IRType) -> str:
        if type_ is None or isinstance(type_, IRNoneType):
            return "never"

        if isinstance(type_, IRExpressionType):
            text = self._expr(type_.expr)
            if type_.type_params:
                text += "<" + ", ".join(self._type(t) for t in type_.type_params) + ">"
            return text

        return f"/* unknown type: {type(type_).__name__} */"

    def _operand(self, expr: IRExpr, parent_prec: int) -> str:
        text = self._expr(expr)
        if isinstance(expr, IRBinOp) and _PRECEDENCE.get(expr.op, 0) < parent_prec:
            return f"({text})"
        return text

    @staticmethod
    def _literal(value) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return repr(value)
        return json.dumps(str(value), ensure_ascii=False)

    @staticmethod
    def _key(key: str) -> str:
        return key if _IDENT_RE.match(key) else json.dumps(key, ensure_ascii=False)
