"""Registry of the well-known runtime symbols referenced by lowered definitions."""

from __future__ import annotations

from dataclasses import dataclass

from .nodes import IRBinOp, IRExternalRef, IRLiteral, IRTypeof, IRVar


@dataclass(frozen=True)
class SymbolDef:
    """A single runtime export the generated code can reference."""

    name: str
    """Exported name exactly as it appears in the runtime module."""

    is_type: bool = False
    """True for type-only exports (used in annotations, never called)."""


SYMBOLS: dict[str, SymbolDef] = {
    "define_module": SymbolDef("ɵɵdefineModule"),
    "set_module_scope": SymbolDef("ɵɵsetModuleScope"),
    "define_injector": SymbolDef("ɵɵdefineInjector"),
    "module_def_with_meta": SymbolDef("ɵɵModuleDefWithMeta", is_type=True),
    "injector_def": SymbolDef("ɵɵInjectorDef", is_type=True),
}


@dataclass(frozen=True)
class RuntimeConfig:
    """Where runtime symbols come from and which global gates debug-only code."""

    runtime_module: str = "@defgen/core"
    jit_flag: str = "jitMode"


DEFAULT_CONFIG = RuntimeConfig()


def runtime_ref(key: str, config: RuntimeConfig = DEFAULT_CONFIG) -> IRExternalRef:
    """Build a reference to the runtime symbol registered under `key`."""
    return IRExternalRef(module=config.runtime_module, name=SYMBOLS[key].name)


def jit_mode_guard(config: RuntimeConfig = DEFAULT_CONFIG) -> IRBinOp:
    """`typeof <flag> === "undefined" || <flag>`

    An undeclared flag counts as enabled; only builds that define the flag
    as false skip guarded code.
    """
    flag = IRVar(name=config.jit_flag)
    undeclared = IRBinOp(left=IRTypeof(expr=flag), op="===",
                         right=IRLiteral(value="undefined"))
    return IRBinOp(left=undeclared, op="||", right=flag)
