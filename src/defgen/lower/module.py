"""Module lowering: ModuleDescriptor → define-module call + scope registration."""

from __future__ import annotations

import logging
from typing import Optional

from ..descriptors import ModuleDescriptor
from ..ir.identifiers import DEFAULT_CONFIG, RuntimeConfig, jit_mode_guard, runtime_ref
from ..ir.nodes import (
    IRArray,
    IRCall,
    IRExpressionType,
    IRExprStmt,
    IRGuardedCall,
    IRIsolatedSideEffect,
    IRStmt,
)
from .core import LoweringResult
from .definition_map import MODULE_DEF_KEYS, MODULE_SCOPE_KEYS, DefinitionMap
from .refs import refs_to_array, tuple_type_of

logger = logging.getLogger(__name__)


def lower_module(desc: ModuleDescriptor,
                 config: RuntimeConfig = DEFAULT_CONFIG) -> LoweringResult:
    """Lower a module descriptor.

    Field order in the definition object is the order of the set() calls
    below. Scope data (declarations/imports/exports) goes into the
    definition only when emit_inline is set; otherwise it moves to a
    separate debug-only registration statement so unused entities stay
    removable by dead-code elimination.
    """
    forward = desc.contains_forward_decls
    statements: list[IRStmt] = []
    definition = DefinitionMap(MODULE_DEF_KEYS)
    definition.set("type", desc.internal_type)

    if desc.bootstrap:
        definition.set("bootstrap", refs_to_array(desc.bootstrap, forward))

    if desc.emit_inline:
        if desc.declarations:
            definition.set("declarations", refs_to_array(desc.declarations, forward))
        if desc.imports:
            definition.set("imports", refs_to_array(desc.imports, forward))
        if desc.exports:
            definition.set("exports", refs_to_array(desc.exports, forward))
    else:
        registration = build_scope_registration(desc, config)
        if registration is not None:
            statements.append(registration)

    # Schemas are runtime constants and never need deferring
    if desc.schemas:
        definition.set("schemas", IRArray(entries=[ref.value for ref in desc.schemas]))

    if desc.id is not None:
        definition.set("id", desc.id)

    logger.debug("module definition fields: %s (%d statement(s))",
                 ", ".join(definition.keys()), len(statements))

    expression = IRCall(callee=runtime_ref("define_module", config),
                        args=[definition.to_literal_object()], pure=True)
    # The type always carries full scope information, even when split out
    type_ = IRExpressionType(
        expr=runtime_ref("module_def_with_meta", config),
        type_params=[
            IRExpressionType(expr=desc.type.type),
            tuple_type_of(desc.declarations),
            tuple_type_of(desc.imports),
            tuple_type_of(desc.exports),
        ],
    )
    return LoweringResult(expression=expression, type=type_, statements=statements)


def build_scope_registration(desc: ModuleDescriptor,
                             config: RuntimeConfig = DEFAULT_CONFIG) -> Optional[IRStmt]:
    """Build `(function () { (<jit guard>) && setModuleScope(T, {...}); })();`

    Returns None when the module has no declarations, imports or exports.
    """
    forward = desc.contains_forward_decls
    scope = DefinitionMap(MODULE_SCOPE_KEYS)

    if desc.declarations:
        scope.set("declarations", refs_to_array(desc.declarations, forward))
    if desc.imports:
        scope.set("imports", refs_to_array(desc.imports, forward))
    if desc.exports:
        scope.set("exports", refs_to_array(desc.exports, forward))

    if not len(scope):
        return None

    call = IRCall(callee=runtime_ref("set_module_scope", config),
                  args=[desc.adjacent_type, scope.to_literal_object()])
    guarded = IRGuardedCall(condition=jit_mode_guard(config), call=call)
    return IRIsolatedSideEffect(stmt=IRExprStmt(expr=guarded))
