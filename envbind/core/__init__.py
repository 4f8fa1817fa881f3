"""Core package exports."""

from .binder import Binder, load
from .errors import AllocationError, BindError, ConversionError, NilRecordError, NotARecordError, UnaddressableError
from .fields import env_field
from .lookup import dotenv_lookup, lookup_env, mapping_lookup

__all__ = [
    "AllocationError",
    "BindError",
    "Binder",
    "ConversionError",
    "NilRecordError",
    "NotARecordError",
    "UnaddressableError",
    "dotenv_lookup",
    "env_field",
    "load",
    "lookup_env",
    "mapping_lookup",
]
