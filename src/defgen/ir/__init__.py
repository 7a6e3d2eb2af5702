"""IR package: nodes, runtime symbol registry, and emitter."""

from .nodes import (
    NONE_TYPE, IRArray, IRBinOp, IRCall, IRDeferred, IRExpr, IRExpressionType,
    IRExprStmt, IRExternalRef, IRGuardedCall, IRIsolatedSideEffect, IRLiteral,
    IRNoneType, IRObject, IRRawExpr, IRStmt, IRType, IRTypeof, IRVar,
)
from .identifiers import (
    DEFAULT_CONFIG, SYMBOLS, RuntimeConfig, SymbolDef, jit_mode_guard, runtime_ref,
)
from .emitter import Emitter
