"""IR node definitions for the defgen lowering pass.

Tree-structured IR between descriptors and TypeScript text emission.
Lowering decides the shape of every definition; the emitter is a simple
tree walk that never reorders or drops anything.

Three node kinds carry code-shape decisions as data rather than as
hand-built closures:

- IRDeferred: a reference list whose evaluation is postponed behind a thunk.
- IRGuardedCall: a call that only runs when a debug-mode condition holds.
- IRIsolatedSideEffect: a statement emitted inside an immediately invoked
  closure so its bindings never leak into the surrounding scope.
"""

from __future__ import annotations
from dataclasses import dataclass, field


# --- Expressions ---

@dataclass
class IRExpr:
    """Base for IR expressions."""
    pass


@dataclass
class IRLiteral(IRExpr):
    """Literal value (str, int, float, bool or None)."""
    value: object = None


@dataclass
class IRVar(IRExpr):
    """Identifier reference by name (may be dotted, e.g. 'i1.Dir')."""
    name: str = ""


@dataclass
class IRExternalRef(IRExpr):
    """Reference to a well-known runtime symbol exported by `module`."""
    module: str = ""
    name: str = ""


@dataclass
class IRRawExpr(IRExpr):
    """Escape hatch: pre-rendered expression text."""
    text: str = ""


@dataclass
class IRArray(IRExpr):
    """Array literal: `[a, b, c]`."""
    entries: list[IRExpr] = field(default_factory=list)


@dataclass
class IRObject(IRExpr):
    """Object literal. Entries are emitted in list order."""
    entries: list[tuple[str, IRExpr]] = field(default_factory=list)


@dataclass
class IRCall(IRExpr):
    """Function call. `pure` marks the call as side-effect free."""
    callee: IRExpr = None
    args: list[IRExpr] = field(default_factory=list)
    pure: bool = False


@dataclass
class IRBinOp(IRExpr):
    """Binary operator."""
    left: IRExpr = None
    op: str = ""
    right: IRExpr = None


@dataclass
class IRTypeof(IRExpr):
    """`typeof expr`. Used both as a runtime check and as a type query."""
    expr: IRExpr = None


@dataclass
class IRDeferred(IRExpr):
    """Zero-argument closure returning `expr`: `function () { return expr; }`."""
    expr: IRExpr = None


@dataclass
class IRGuardedCall(IRExpr):
    """`(condition) && call`: the call only runs when condition holds."""
    condition: IRExpr = None
    call: IRCall = None


# --- Statements ---

@dataclass
class IRStmt:
    """Base for IR statements."""
    pass


@dataclass
class IRExprStmt(IRStmt):
    """Expression as statement."""
    expr: IRExpr = None


@dataclass
class IRIsolatedSideEffect(IRStmt):
    """Statement run inside `(function () { stmt })();`."""
    stmt: IRStmt = None


# --- Type expressions ---

@dataclass
class IRType:
    """Base for IR type expressions."""
    pass


@dataclass
class IRNoneType(IRType):
    """The 'no type' sentinel. Emitted as `never`."""
    pass


NONE_TYPE = IRNoneType()


@dataclass
class IRExpressionType(IRType):
    """A value expression used in type position, with optional type arguments."""
    expr: IRExpr = None
    type_params: list[IRType] = field(default_factory=list)
