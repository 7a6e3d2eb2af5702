"""Lowering package: descriptors → definition IR."""

from .core import LoweringResult
from .definition_map import DefinitionMap, DuplicateKeyError
from .injector import lower_injector
from .module import build_scope_registration, lower_module
from .refs import refs_to_array, tuple_type_of

__all__ = [
    "DefinitionMap",
    "DuplicateKeyError",
    "LoweringResult",
    "build_scope_registration",
    "lower_injector",
    "lower_module",
    "refs_to_array",
    "tuple_type_of",
]
