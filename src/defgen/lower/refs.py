"""Reference lists → array values and tuple types."""

from __future__ import annotations

from typing import Sequence

from ..descriptors import InvariantViolation, Reference
from ..ir.nodes import (
    NONE_TYPE, IRArray, IRDeferred, IRExpr, IRExpressionType, IRType, IRTypeof,
)


def refs_to_array(refs: Sequence[Reference], forward_declare: bool) -> IRExpr:
    """Array literal of each reference's value, in order.

    With forward_declare the array is wrapped in a thunk so the identifiers
    inside are only read when the runtime calls it. The flag applies to the
    whole list.
    """
    if not refs:
        raise InvariantViolation("refs_to_array called with an empty reference list")
    values = IRArray(entries=[ref.value for ref in refs])
    return IRDeferred(expr=values) if forward_declare else values


def tuple_type_of(refs: Sequence[Reference]) -> IRType:
    """`[typeof A, typeof B, ...]` for a non-empty list, NONE_TYPE otherwise."""
    if not refs:
        return NONE_TYPE
    types = IRArray(entries=[IRTypeof(expr=ref.type) for ref in refs])
    return IRExpressionType(expr=types)
