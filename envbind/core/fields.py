"""Per-field descriptors: external names, tag parsing and type introspection."""

from __future__ import annotations

import dataclasses
import functools
import re
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

# Metadata key holding the primary tag; change it to read tags written for another key.
TAG_NAME = "env"
PREFIX_TAG = "prefix"
SECRET_SUFFIX = ",secret"
SKIP = "-"

_NAME_PATTERN = re.compile(r"([^A-Z_])([A-Z])")

_UNION_TYPES = (Union, types.UnionType)


@dataclass(frozen=True)
class FieldSpec:
    """How one dataclass field maps onto the lookup source."""

    attr: str
    name: str
    secret: bool = False
    prefix: str = ""
    hint: Any = str
    target: Any = str
    optional: bool = False
    nested: bool = False

    @property
    def skip(self) -> bool:
        return self.name == SKIP


def to_upper_snake(name: str) -> str:
    """Convert ``camelCase``/``MixedCase`` into ``UPPER_SNAKE_CASE``.

    A separator is inserted only before an uppercase letter that follows a
    character which is neither uppercase nor ``_``, so runs of capitals stay
    together (``APIHost`` becomes ``APIHOST``).
    """
    return _NAME_PATTERN.sub(r"\1_\2", name).upper()


def parse_tag(tag: str, attr: str) -> tuple[str, bool]:
    """Return the external name and secret flag encoded in a primary tag."""
    name = tag[: -len(SECRET_SUFFIX)] if tag.endswith(SECRET_SUFFIX) else tag
    secret = len(name) < len(tag)
    if not name:
        name = to_upper_snake(attr)
    return name, secret


def unwrap_optional(hint: Any) -> tuple[Any, bool]:
    """Strip every ``Optional[...]`` layer from ``hint``."""
    optional = False
    while typing.get_origin(hint) in _UNION_TYPES:
        args = typing.get_args(hint)
        remaining = [arg for arg in args if arg is not type(None)]
        if len(remaining) != 1 or len(remaining) == len(args):
            break
        optional = True
        hint = remaining[0]
    return hint, optional


def is_record_type(target: Any) -> bool:
    return isinstance(target, type) and dataclasses.is_dataclass(target)


def resolve_hints(cls: type) -> dict[str, Any]:
    """Return the evaluated annotation of every field of the dataclass ``cls``.

    When the class as a whole cannot be resolved (a name imported only under
    ``TYPE_CHECKING``, a class local to a function...), fields are resolved
    one at a time so a single bad annotation only affects its own field.
    """
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        return {item.name: _resolve_field_hint(cls, item) for item in dataclasses.fields(cls)}


def _resolve_field_hint(cls: type, item: dataclasses.Field) -> Any:
    if not isinstance(item.type, str):
        return item.type
    holder = type(cls.__name__, (), {"__annotations__": {item.name: item.type}, "__module__": cls.__module__})
    try:
        return typing.get_type_hints(holder, localns={cls.__name__: cls})[item.name]
    except (NameError, TypeError):
        pass
    # Still unresolved: use the type of the default, if there is one.
    if isinstance(item.default_factory, type):
        return item.default_factory
    if item.default is not dataclasses.MISSING and item.default is not None:
        return type(item.default)
    return item.type


def field_specs(cls: type) -> tuple[FieldSpec, ...]:
    """Return the cached descriptors of the exported fields of ``cls``."""
    return _field_specs(cls, TAG_NAME)


@functools.lru_cache(maxsize=None)
def _field_specs(cls: type, tag_name: str) -> tuple[FieldSpec, ...]:
    hints = resolve_hints(cls)
    specs = []
    for item in dataclasses.fields(cls):
        if item.name.startswith("_"):
            continue
        hint = hints.get(item.name, item.type)
        target, optional = unwrap_optional(hint)
        name, secret = parse_tag(item.metadata.get(tag_name, ""), item.name)
        specs.append(
            FieldSpec(
                attr=item.name,
                name=name,
                secret=secret,
                prefix=item.metadata.get(PREFIX_TAG, ""),
                hint=hint,
                target=target,
                optional=optional,
                nested=is_record_type(target),
            )
        )
    return tuple(specs)


def env_field(
    name: str | None = None,
    *,
    secret: bool = False,
    skip: bool = False,
    prefix: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """``dataclasses.field`` carrying binder tags.

    ``env_field("DB_PASS", secret=True)`` is equivalent to
    ``field(metadata={"env": "DB_PASS,secret"})``.
    """
    if skip and (name or secret):
        raise ValueError("skip cannot be combined with a name or the secret flag")
    tags = dict(metadata or {})
    tag = SKIP if skip else (name or "") + (SECRET_SUFFIX if secret else "")
    if tag:
        tags[TAG_NAME] = tag
    if prefix:
        tags[PREFIX_TAG] = prefix
    return field(metadata=tags, **kwargs)


__all__ = [
    "FieldSpec",
    "PREFIX_TAG",
    "SECRET_SUFFIX",
    "SKIP",
    "TAG_NAME",
    "env_field",
    "field_specs",
    "is_record_type",
    "parse_tag",
    "resolve_hints",
    "to_upper_snake",
    "unwrap_optional",
]
