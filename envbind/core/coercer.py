"""Conversion of looked-up strings into typed field values."""

from __future__ import annotations

import copy
import dataclasses
import json
import math
import re
import struct
import typing
from typing import Any

from .errors import ConversionError, UnaddressableError
from .fields import is_record_type, resolve_hints, unwrap_optional
from .types import (
    FLOAT_BITS,
    SIGNED_BITS,
    UNSIGNED_BITS,
    DecodesBinary,
    DecodesText,
    SetsFromString,
)

# Single underscores may separate digits, or follow a base prefix.
_INT_PATTERN = re.compile(
    r"([+-]?)"
    r"(0[xX](?:_?[0-9a-fA-F])+|0[oO](?:_?[0-7])+|0[bB](?:_?[01])+|0(?:_?[0-7])*|[1-9](?:_?[0-9])*)"
)
_INFINITY_PATTERN = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)

_BOOL_LITERALS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)

# Checked in order; the first capability the destination type implements wins.
_CAPABILITIES = (
    (SetsFromString, lambda instance, text: instance.set(text)),
    (DecodesText, lambda instance, text: instance.decode_text(text)),
    (DecodesBinary, lambda instance, text: instance.decode_binary(text.encode("utf-8"))),
)


def assign(
    record: Any,
    attr: str,
    hint: Any,
    text: str,
    *,
    name: str | None = None,
    secret: bool = False,
) -> None:
    """Convert ``text`` to ``hint`` and write it onto ``record.attr``.

    Raises:
        ConversionError: the string could not be converted; the parse or
            decode failure is chained as ``__cause__``.
        UnaddressableError: the record refused the write.
    """
    try:
        value = coerce(hint, text, getattr(record, attr, None))
    except Exception as exc:
        raise ConversionError(attr, name, hint, text, secret=secret) from exc
    write(record, attr, value)


def write(record: Any, attr: str, value: Any) -> None:
    try:
        setattr(record, attr, value)
    except AttributeError as exc:
        raise UnaddressableError(attr) from exc


def coerce(hint: Any, text: str, current: Any = None) -> Any:
    """Return ``text`` converted to the type described by ``hint``.

    ``current`` is the value the destination holds now; types implementing a
    coercion capability start from a shallow copy of it when it already has
    their type, so defaults shared between records are left alone.
    """
    target, _ = unwrap_optional(hint)
    base = _supertype(target)

    if isinstance(base, type) and typing.get_origin(base) is None:
        for capability, apply in _CAPABILITIES:
            if issubclass(base, capability):
                instance = copy.copy(current) if isinstance(current, base) else zero_value(base)
                apply(instance, text)
                return instance

    if base is str:
        return text
    if target in UNSIGNED_BITS:
        return parse_int(text, UNSIGNED_BITS[target], signed=False)
    if target in SIGNED_BITS or base is int:
        return parse_int(text, SIGNED_BITS.get(target, 64), signed=True)
    if base is bool:
        return parse_bool(text)
    if target in FLOAT_BITS or base is float:
        return parse_float(text, FLOAT_BITS.get(target, 64))
    if base in (bytes, bytearray):
        return base(text.encode("utf-8"))
    return _decode_json(target, text)


def parse_int(text: str, bits: int, *, signed: bool) -> int:
    """Parse an integer literal with base auto-detection.

    Accepts decimal, ``0x`` hex, ``0o`` or leading-zero octal and ``0b``
    binary, with optional ``_`` digit separators (``1_000``, ``0x_ff``).
    Values outside the ``bits`` wide range raise ``OverflowError``.
    """
    match = _INT_PATTERN.fullmatch(text)
    if match is None or (match.group(1) and not signed):
        raise ValueError(f'parsing "{text}": invalid syntax')
    sign, digits = match.groups()
    digits = digits.replace("_", "")
    if digits[:2].lower() in ("0x", "0o", "0b"):
        number = int(digits, 0)
    elif digits.startswith("0"):
        number = int(digits, 8)
    else:
        number = int(digits)
    if sign == "-":
        number = -number

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= number <= high:
        raise OverflowError(f'parsing "{text}": value out of range')
    return number


def parse_bool(text: str) -> bool:
    try:
        return _BOOL_LITERALS[text]
    except KeyError:
        raise ValueError(f'parsing "{text}": invalid syntax') from None


def parse_float(text: str, bits: int) -> float:
    if not text or text != text.strip():
        raise ValueError(f'parsing "{text}": invalid syntax')
    number = float(text)
    if bits == 32:
        try:
            number = struct.unpack("f", struct.pack("f", number))[0]
        except OverflowError:
            raise OverflowError(f'parsing "{text}": value out of range') from None
    if math.isinf(number) and not _INFINITY_PATTERN.fullmatch(text):
        raise OverflowError(f'parsing "{text}": value out of range')
    return number


def zero_value(hint: Any) -> Any:
    """Return the empty value of a type: ``""``, ``0``, an empty container...

    Dataclasses are built with every required field set to its own zero
    value, so nested records can be allocated without caller input. Types
    that cannot be built without arguments give ``None``.
    """
    target, optional = unwrap_optional(hint)
    if optional or target is Any:
        return None
    base = _supertype(target)
    origin = typing.get_origin(base)
    if origin is not None:
        try:
            return origin()
        except TypeError:
            return None
    if is_record_type(base):
        hints = resolve_hints(base)
        required = {
            item.name: zero_value(hints.get(item.name, item.type))
            for item in dataclasses.fields(base)
            if item.init
            and item.default is dataclasses.MISSING
            and item.default_factory is dataclasses.MISSING
        }
        return base(**required)
    try:
        return base()
    except TypeError:
        # Needs constructor arguments, e.g. datetime.
        return None


def _supertype(target: Any) -> Any:
    while hasattr(target, "__supertype__"):
        target = target.__supertype__
    return target


def _decode_json(target: Any, text: str) -> Any:
    decoded = json.loads(text)
    origin = typing.get_origin(target) or target
    if origin in _SEQUENCE_ORIGINS:
        if not isinstance(decoded, list):
            raise TypeError(f"expected a JSON array, received {type(decoded).__name__}")
        return decoded if origin is list else origin(decoded)
    if origin is dict:
        if not isinstance(decoded, dict):
            raise TypeError(f"expected a JSON object, received {type(decoded).__name__}")
    return decoded


__all__ = [
    "assign",
    "coerce",
    "parse_bool",
    "parse_float",
    "parse_int",
    "write",
    "zero_value",
]
