"""Descriptor records consumed by the lowering pass.

Descriptors are produced upstream (see loader.py for the JSON front end)
and are read-only here. Construction checks structure only: required
fields are present and hold IR nodes of the right kind. Nothing semantic
(cycles, duplicates, type compatibility) is checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .ir.nodes import IRExpr


class InvariantViolation(Exception):
    """A caller broke a structural contract of the lowering pass."""


def _require_expr(owner: str, name: str, value):
    if value is None:
        raise InvariantViolation(f"{owner}.{name} is required")
    if not isinstance(value, IRExpr):
        raise InvariantViolation(
            f"{owner}.{name} must be an IR expression, got {type(value).__name__}")


def _require_reference(owner: str, name: str, value):
    if value is None:
        raise InvariantViolation(f"{owner}.{name} is required")
    if not isinstance(value, Reference):
        raise InvariantViolation(f"{owner}.{name} must be a Reference")


def _ref_tuple(owner: str, name: str, value) -> tuple:
    if value is None or isinstance(value, (str, bytes)):
        raise InvariantViolation(f"{owner}.{name} must be a sequence of references")
    refs = tuple(value)
    for i, ref in enumerate(refs):
        if not isinstance(ref, Reference):
            raise InvariantViolation(
                f"{owner}.{name}[{i}] must be a Reference, got {type(ref).__name__}")
    return refs


@dataclass(frozen=True)
class Reference:
    """One declared entity as it appears in generated code and in generated types."""
    # required; None is rejected on construction
    value: IRExpr = None
    type: IRExpr = None

    def __post_init__(self):
        _require_expr("Reference", "value", self.value)
        _require_expr("Reference", "type", self.type)


@dataclass(frozen=True)
class ModuleDescriptor:
    """Everything needed to lower one module definition.

    internal_type is used inside the definition object; adjacent_type by
    statements emitted next to it. Both denote the same entity as
    type.value but may be spelled differently when the definition sits
    inside an isolating closure.
    """
    # required; None is rejected on construction
    type: Reference = None
    internal_type: IRExpr = None
    adjacent_type: IRExpr = None
    bootstrap: tuple[Reference, ...] = ()
    declarations: tuple[Reference, ...] = ()
    imports: tuple[Reference, ...] = ()
    exports: tuple[Reference, ...] = ()
    emit_inline: bool = False
    contains_forward_decls: bool = False
    schemas: Optional[tuple[Reference, ...]] = None
    id: Optional[IRExpr] = None

    def __post_init__(self):
        _require_reference("ModuleDescriptor", "type", self.type)
        _require_expr("ModuleDescriptor", "internal_type", self.internal_type)
        _require_expr("ModuleDescriptor", "adjacent_type", self.adjacent_type)
        for name in ("bootstrap", "declarations", "imports", "exports"):
            object.__setattr__(self, name,
                               _ref_tuple("ModuleDescriptor", name, getattr(self, name)))
        if self.schemas is not None:
            object.__setattr__(self, "schemas",
                               _ref_tuple("ModuleDescriptor", "schemas", self.schemas))
        if self.id is not None:
            _require_expr("ModuleDescriptor", "id", self.id)


@dataclass(frozen=True)
class InjectorDescriptor:
    """Everything needed to lower one injector definition."""
    # required; None is rejected on construction
    name: str = None
    type: Reference = None
    internal_type: IRExpr = None
    providers: Optional[IRExpr] = None
    imports: tuple[IRExpr, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.name is None:
            raise InvariantViolation("InjectorDescriptor.name is required")
        if not isinstance(self.name, str) or not self.name:
            raise InvariantViolation("InjectorDescriptor.name must be a non-empty string")
        _require_reference("InjectorDescriptor", "type", self.type)
        _require_expr("InjectorDescriptor", "internal_type", self.internal_type)
        if self.providers is not None:
            _require_expr("InjectorDescriptor", "providers", self.providers)
        if self.imports is None or isinstance(self.imports, (str, bytes)):
            raise InvariantViolation("InjectorDescriptor.imports must be a sequence of expressions")
        imports = tuple(self.imports)
        for i, imp in enumerate(imports):
            _require_expr("InjectorDescriptor", f"imports[{i}]", imp)
        object.__setattr__(self, "imports", imports)
