"""JSON descriptor documents → ModuleDescriptor / InjectorDescriptor.

Document shape:

    {"modules": [{"name": "AppModule", "declarations": ["AppCmp"], ...}],
     "injectors": [{"name": "AppModule", "providers": "[Svc]"}]}

Expression values:
- a dotted identifier string ("Foo", "i1.Bar") → IRVar
- any other string → IRRawExpr (pre-rendered text)
- a number, bool or null → IRLiteral
- {"literal": v} → IRLiteral(v); {"raw": "text"} → IRRawExpr

References are an expression (used as both value and type) or
{"value": expr, "type": expr}.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Optional

from .descriptors import InjectorDescriptor, InvariantViolation, ModuleDescriptor, Reference
from .ir.nodes import IRExpr, IRLiteral, IRRawExpr, IRVar

_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_DOTTED_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

_MODULE_KEYS = {
    "name", "type", "internalType", "adjacentType", "bootstrap", "declarations",
    "imports", "exports", "emitInline", "containsForwardDecls", "schemas", "id",
}
_INJECTOR_KEYS = {"name", "type", "internalType", "providers", "imports"}


class LoadError(Exception):
    def __init__(self, message: str, path: str = "",
                 line: Optional[int] = None, col: Optional[int] = None):
        self.message = message
        self.path = path
        self.line = line
        self.col = col
        where = f"{path}: " if path else ""
        super().__init__(f"{where}{message}")


@dataclass
class Document:
    """Descriptors in document order, keyed by unit name."""
    modules: list[tuple[str, ModuleDescriptor]] = field(default_factory=list)
    injectors: list[tuple[str, InjectorDescriptor]] = field(default_factory=list)


def load_document(source: str) -> Document:
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        raise LoadError(e.msg, line=e.lineno, col=e.colno) from e
    if not isinstance(data, dict):
        raise LoadError("top level must be an object")
    unknown = set(data) - {"modules", "injectors"}
    if unknown:
        raise LoadError(f"unknown key(s): {', '.join(sorted(unknown))}")

    doc = Document()
    for i, entry in enumerate(_list(data.get("modules", []), "modules")):
        path = f"modules[{i}]"
        doc.modules.append(_wrap(path, _load_module, entry, path))
    for i, entry in enumerate(_list(data.get("injectors", []), "injectors")):
        path = f"injectors[{i}]"
        doc.injectors.append(_wrap(path, _load_injector, entry, path))
    return doc


def load_file(filename: str) -> Document:
    with open(filename, "r", encoding="utf-8") as f:
        return load_document(f.read())


def _wrap(path, fn, *args):
    # Descriptor constructors raise InvariantViolation; report it with the entry path
    try:
        return fn(*args)
    except InvariantViolation as e:
        raise LoadError(str(e), path) from e


def _load_module(entry, path: str) -> tuple[str, ModuleDescriptor]:
    name, ref = _unit_header(entry, path, _MODULE_KEYS)
    schemas = entry.get("schemas")
    desc = ModuleDescriptor(
        type=ref,
        internal_type=_expr_or(entry, "internalType", path, ref.value),
        adjacent_type=_expr_or(entry, "adjacentType", path, ref.value),
        bootstrap=_refs(entry, "bootstrap", path),
        declarations=_refs(entry, "declarations", path),
        imports=_refs(entry, "imports", path),
        exports=_refs(entry, "exports", path),
        emit_inline=_bool(entry, "emitInline", path),
        contains_forward_decls=_bool(entry, "containsForwardDecls", path),
        schemas=None if schemas is None else _refs(entry, "schemas", path),
        id=_expr_or(entry, "id", path, None),
    )
    return name, desc


def _load_injector(entry, path: str) -> tuple[str, InjectorDescriptor]:
    name, ref = _unit_header(entry, path, _INJECTOR_KEYS)
    imports = [_expr(v, f"{path}.imports[{i}]")
               for i, v in enumerate(_list(entry.get("imports", []), f"{path}.imports"))]
    desc = InjectorDescriptor(
        name=name,
        type=ref,
        internal_type=_expr_or(entry, "internalType", path, ref.value),
        providers=_expr_or(entry, "providers", path, None),
        imports=imports,
    )
    return name, desc


def _unit_header(entry, path: str, allowed: set[str]) -> tuple[str, Reference]:
    if not isinstance(entry, dict):
        raise LoadError("expected an object", path)
    unknown = set(entry) - allowed
    if unknown:
        raise LoadError(f"unknown key(s): {', '.join(sorted(unknown))}", path)
    name = entry.get("name")
    if not isinstance(name, str) or not _IDENT_RE.match(name):
        raise LoadError("'name' must be an identifier", path)
    ref = _ref(entry.get("type") or name, f"{path}.type")
    return name, ref


def _list(value, path: str) -> list:
    if not isinstance(value, list):
        raise LoadError("expected a list", path)
    return value


def _bool(entry: dict, key: str, path: str) -> bool:
    value = entry.get(key, False)
    if not isinstance(value, bool):
        raise LoadError("expected true or false", f"{path}.{key}")
    return value


def _refs(entry: dict, key: str, path: str) -> list[Reference]:
    items = _list(entry.get(key, []), f"{path}.{key}")
    return [_ref(v, f"{path}.{key}[{i}]") for i, v in enumerate(items)]


def _ref(value, path: str) -> Reference:
    if isinstance(value, dict) and "value" in value:
        unknown = set(value) - {"value", "type"}
        if unknown:
            raise LoadError(f"unknown key(s): {', '.join(sorted(unknown))}", path)
        expr = _expr(value["value"], f"{path}.value")
        type_ = _expr(value["type"], f"{path}.type") if "type" in value else expr
        return Reference(value=expr, type=type_)
    expr = _expr(value, path)
    return Reference(value=expr, type=expr)


def _expr_or(entry: dict, key: str, path: str, default):
    if entry.get(key) is None:
        return default
    return _expr(entry[key], f"{path}.{key}")


def _expr(value, path: str) -> IRExpr:
    if isinstance(value, str):
        if not value.strip():
            raise LoadError("empty expression", path)
        if _DOTTED_IDENT_RE.match(value):
            return IRVar(name=value)
        return IRRawExpr(text=value)
    if value is None or isinstance(value, (bool, int, float)):
        return IRLiteral(value=value)
    if isinstance(value, dict) and set(value) == {"literal"}:
        literal = value["literal"]
        if literal is not None and not isinstance(literal, (str, bool, int, float)):
            raise LoadError("literal must be a string, number, boolean or null", path)
        return IRLiteral(value=literal)
    if isinstance(value, dict) and set(value) == {"raw"} and isinstance(value["raw"], str):
        return IRRawExpr(text=value["raw"])
    raise LoadError(f"cannot use {type(value).__name__} as an expression", path)
