"""Ordered, append-only builder for definition object literals."""

from __future__ import annotations

from ..descriptors import InvariantViolation
from ..ir.nodes import IRExpr, IRObject

# Closed key sets per definition kind. Emission order is the order in
# which the lowering code calls set(), not the order listed here.
MODULE_DEF_KEYS = ("type", "bootstrap", "declarations", "imports", "exports", "schemas", "id")
MODULE_SCOPE_KEYS = ("declarations", "imports", "exports")
INJECTOR_DEF_KEYS = ("providers", "imports")


class DuplicateKeyError(InvariantViolation):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"definition key '{key}' set twice")


class DefinitionMap:
    """Accumulates `key → expression` entries for one definition object.

    Only keys from `allowed_keys` may be set, each at most once. There is
    no removal: a map lives for exactly one lowering call.
    """

    def __init__(self, allowed_keys: tuple[str, ...]):
        self.allowed_keys = allowed_keys
        self._entries: list[tuple[str, IRExpr]] = []

    def set(self, key: str, value: IRExpr):
        if key not in self.allowed_keys:
            raise InvariantViolation(
                f"unknown definition key '{key}' (expected one of {', '.join(self.allowed_keys)})")
        if key in self:
            raise DuplicateKeyError(key)
        if not isinstance(value, IRExpr):
            raise InvariantViolation(f"definition key '{key}' needs an IR expression")
        self._entries.append((key, value))

    def keys(self) -> list[str]:
        return [k for k, _ in self._entries]

    def to_literal_object(self) -> IRObject:
        """Serialize to an object literal, entries in insertion order."""
        return IRObject(entries=list(self._entries))

    def __contains__(self, key: str) -> bool:
        return any(k == key for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
