"""defgen: lowers module and injector descriptors to definition IR."""

from .descriptors import (
    InjectorDescriptor as InjectorDescriptor,
    InvariantViolation as InvariantViolation,
    ModuleDescriptor as ModuleDescriptor,
    Reference as Reference,
)
from .ir.emitter import Emitter as Emitter
from .ir.identifiers import RuntimeConfig as RuntimeConfig
from .loader import LoadError as LoadError, load_document as load_document
from .lower import (
    DuplicateKeyError as DuplicateKeyError,
    LoweringResult as LoweringResult,
    lower_injector as lower_injector,
    lower_module as lower_module,
)
