"""Binding of lookup values onto dataclass records."""

from __future__ import annotations

import dataclasses
from typing import Any, TypeVar

from .coercer import assign, write, zero_value
from .errors import SECRET_MASK, AllocationError, NilRecordError, NotARecordError
from .fields import FieldSpec, field_specs, is_record_type
from .log_bridge import LogFunc, log_printf
from .lookup import LookupFunc, lookup_env

RecordT = TypeVar("RecordT")

DEFAULT_PREFIX = "APP_"


class Binder:
    """Loads dataclass instances with values returned by a lookup function.

    Every exported field is looked up under ``prefix + NAME`` where ``NAME``
    is the field's ``env`` tag or its name in ``UPPER_SNAKE_CASE``. A tag of
    ``"-"`` skips the field and a ``",secret"`` suffix masks the value in
    log output. Dataclass-typed fields are loaded recursively, with their
    ``prefix`` tag appended to the active prefix while they are walked.

    A Binder holds no per-call state, so one instance may serve concurrent
    ``load`` calls against different records.
    """

    def __init__(self, prefix: str = "", log: LogFunc | None = None, *, lookup: LookupFunc = lookup_env) -> None:
        self._prefix = prefix
        self._log = log
        self._lookup = lookup

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def log(self) -> LogFunc | None:
        return self._log

    @property
    def lookup(self) -> LookupFunc:
        return self._lookup

    def load(self, record: RecordT) -> RecordT:
        """Populate ``record`` in place and return it.

        Fields are visited in declaration order, depth first. Names missing
        from the lookup source leave the field untouched; the first
        conversion failure aborts the load and earlier fields keep their new
        values.

        Raises:
            NilRecordError: ``record`` is ``None``.
            NotARecordError: ``record`` is not a dataclass instance.
            ConversionError: a looked-up value does not fit its field.
            UnaddressableError: the record refused a write.
            AllocationError: a ``None`` nested record could not be built.
        """
        self._load(record, self._prefix)
        return record

    def _load(self, record: Any, prefix: str) -> None:
        if record is None:
            raise NilRecordError()
        if isinstance(record, type) or not dataclasses.is_dataclass(record):
            raise NotARecordError(record)

        for spec in field_specs(type(record)):
            if spec.nested or _holds_record(record, spec):
                self._load_nested(record, spec, prefix)
            else:
                self._load_leaf(record, spec, prefix)

    def _load_nested(self, record: Any, spec: FieldSpec, prefix: str) -> None:
        nested = getattr(record, spec.attr, None)
        if nested is None:
            try:
                nested = zero_value(spec.target)
            except Exception as exc:
                raise AllocationError(spec.attr, spec.target) from exc
            write(record, spec.attr, nested)
        self._load(nested, prefix + spec.prefix)

    def _load_leaf(self, record: Any, spec: FieldSpec, prefix: str) -> None:
        if spec.skip:
            return

        full_name = prefix + spec.name
        value, found = self._lookup(full_name)
        if not found:
            return

        if self._log is not None:
            self._log('set %s with $%s="%s"', spec.attr, full_name, SECRET_MASK if spec.secret else value)
        assign(record, spec.attr, spec.hint, value, name=full_name, secret=spec.secret)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self._prefix!r})"


def _holds_record(record: Any, spec: FieldSpec) -> bool:
    # Annotation left unresolved: fall back to the value the field holds.
    return isinstance(spec.hint, str) and is_record_type(type(getattr(record, spec.attr, None)))


_default_binder = Binder(DEFAULT_PREFIX, log_printf)


def load(record: RecordT) -> RecordT:
    """Populate ``record`` from the process environment using the ``APP_`` prefix.

    Each populated field is logged through structlog. See :class:`Binder`.
    """
    return _default_binder.load(record)


__all__ = ["Binder", "DEFAULT_PREFIX", "load"]
