"""Bind environment-style configuration onto dataclass records."""

from .core import (
    AllocationError,
    BindError,
    Binder,
    ConversionError,
    NilRecordError,
    NotARecordError,
    UnaddressableError,
    dotenv_lookup,
    env_field,
    load,
    lookup_env,
    mapping_lookup,
)
from .core.types import (
    DecodesBinary,
    DecodesText,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    SetsFromString,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    "AllocationError",
    "BindError",
    "Binder",
    "ConversionError",
    "DecodesBinary",
    "DecodesText",
    "Float32",
    "Float64",
    "Int16",
    "Int32",
    "Int64",
    "Int8",
    "NilRecordError",
    "NotARecordError",
    "SetsFromString",
    "UInt",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt8",
    "UnaddressableError",
    "dotenv_lookup",
    "env_field",
    "load",
    "lookup_env",
    "mapping_lookup",
]
