"""Result type shared by the module and injector lowerings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..ir.nodes import IRExpr, IRStmt, IRType


@dataclass
class LoweringResult:
    """A lowered definition.

    expression: registers the runtime definition when executed
    type: annotation for `expression` (None when not typed)
    statements: emitted right after the definition, in order
    """
    expression: IRExpr
    type: Optional[IRType] = None
    statements: list[IRStmt] = field(default_factory=list)
