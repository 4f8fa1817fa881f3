"""Sized numeric aliases and the coercion capabilities a field type may implement.

Plain ``int`` and ``float`` fields are treated as 64-bit. Annotate a field
with one of the aliases below to have looked-up values range-checked
against a narrower width::

    @dataclass
    class Config:
        retries: Int8 = 3
        ratio: Float32 = 0.5
"""

from __future__ import annotations

from typing import NewType, Protocol, runtime_checkable

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

UInt = NewType("UInt", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)

Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

SIGNED_BITS = {int: 64, Int8: 8, Int16: 16, Int32: 32, Int64: 64}
UNSIGNED_BITS = {UInt: 64, UInt8: 8, UInt16: 16, UInt32: 32, UInt64: 64}
FLOAT_BITS = {float: 64, Float64: 64, Float32: 32}


@runtime_checkable
class SetsFromString(Protocol):
    """A type that populates itself from a raw string."""

    def set(self, value: str) -> None:
        ...


@runtime_checkable
class DecodesText(Protocol):
    """A type that decodes itself from its textual form."""

    def decode_text(self, text: str) -> None:
        ...


@runtime_checkable
class DecodesBinary(Protocol):
    """A type that decodes itself from raw bytes."""

    def decode_binary(self, data: bytes) -> None:
        ...


__all__ = [
    "DecodesBinary",
    "DecodesText",
    "FLOAT_BITS",
    "Float32",
    "Float64",
    "Int16",
    "Int32",
    "Int64",
    "Int8",
    "SIGNED_BITS",
    "SetsFromString",
    "UInt",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt8",
    "UNSIGNED_BITS",
]
