"""Error taxonomy raised while binding lookup values onto records."""

from __future__ import annotations

from typing import Any

SECRET_MASK = "***"


class BindError(Exception):
    """Base class for every failure raised by a Binder."""


class NotARecordError(BindError, TypeError):
    """Raised when the load target is not a dataclass instance."""

    def __init__(self, target: Any, message: str | None = None) -> None:
        super().__init__(message or f"must be a dataclass instance, received {type(target).__name__}")
        self.target = target


class NilRecordError(NotARecordError):
    """Raised when the load target is ``None``."""

    def __init__(self) -> None:
        super().__init__(None, "the record should not be None")


class ConversionError(BindError, ValueError):
    """Raised when a looked-up string cannot be converted to the field type.

    The underlying parse/decode failure is kept as ``__cause__``.
    """

    def __init__(self, attr: str, name: str | None, target: Any, value: str, *, secret: bool = False) -> None:
        self.attr = attr
        self.name = name
        self.target = target
        self.secret = secret
        self.value = SECRET_MASK if secret else value
        source = f"${name}" if name else "value"
        super().__init__(f"cannot set {attr} ({_type_name(target)}) from {source}={self.value!r}")

    def __str__(self) -> str:
        message = super().__str__()
        if self.__cause__ is None:
            return message
        if self.secret:
            # Parser messages quote the rejected text.
            return f"{message}: {type(self.__cause__).__name__}"
        return f"{message}: {self.__cause__}"


class UnaddressableError(BindError, AttributeError):
    """Raised when a destination attribute refuses to be written."""

    def __init__(self, attr: str) -> None:
        super().__init__(f"the value of {attr} is unaddressable")
        self.attr = attr


class AllocationError(BindError, TypeError):
    """Raised when a ``None`` nested record cannot be built from zero values."""

    def __init__(self, attr: str, target: Any) -> None:
        super().__init__(f"cannot allocate {attr} ({_type_name(target)}) from zero values")
        self.attr = attr
        self.target = target


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


__all__ = [
    "SECRET_MASK",
    "AllocationError",
    "BindError",
    "ConversionError",
    "NilRecordError",
    "NotARecordError",
    "UnaddressableError",
]
