"""Injector lowering: InjectorDescriptor → define-injector call."""

from __future__ import annotations

import logging

from ..descriptors import InjectorDescriptor
from ..ir.identifiers import DEFAULT_CONFIG, RuntimeConfig, runtime_ref
from ..ir.nodes import IRArray, IRCall, IRExpressionType
from .core import LoweringResult
from .definition_map import INJECTOR_DEF_KEYS, DefinitionMap

logger = logging.getLogger(__name__)


def lower_injector(desc: InjectorDescriptor,
                   config: RuntimeConfig = DEFAULT_CONFIG) -> LoweringResult:
    """Lower an injector descriptor. Never produces auxiliary statements."""
    definition = DefinitionMap(INJECTOR_DEF_KEYS)

    if desc.providers is not None:
        definition.set("providers", desc.providers)

    if desc.imports:
        definition.set("imports", IRArray(entries=list(desc.imports)))

    logger.debug("injector %s definition fields: %s",
                 desc.name, ", ".join(definition.keys()) or "(none)")

    expression = IRCall(callee=runtime_ref("define_injector", config),
                        args=[definition.to_literal_object()], pure=True)
    type_ = IRExpressionType(
        expr=runtime_ref("injector_def", config),
        type_params=[IRExpressionType(expr=desc.type.type)],
    )
    return LoweringResult(expression=expression, type=type_)
