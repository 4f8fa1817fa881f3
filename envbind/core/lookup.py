"""Lookup functions resolving an external name to ``(value, found)``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Mapping

from dotenv import dotenv_values

LookupFunc = Callable[[str], tuple[str, bool]]


def lookup_env(name: str) -> tuple[str, bool]:
    """Read ``name`` from the process environment."""
    value = os.environ.get(name)
    if value is None:
        return "", False
    return value, True


def mapping_lookup(values: Mapping[str, str]) -> LookupFunc:
    """Return a lookup reading from a fixed mapping instead of the environment."""

    def lookup(name: str) -> tuple[str, bool]:
        if name in values:
            return values[name], True
        return "", False

    return lookup


def dotenv_lookup(path: Path | str, *, override: bool = False) -> LookupFunc:
    """Return a lookup layering a ``.env`` file beneath the process environment.

    The file is parsed once with python-dotenv. Process variables win unless
    ``override`` is set, matching ``load_dotenv(override=...)``. Keys declared
    without a value are treated as missing.
    """
    file_values = {key: value for key, value in dotenv_values(path).items() if value is not None}
    from_file = mapping_lookup(file_values)
    layers = (from_file, lookup_env) if override else (lookup_env, from_file)

    def lookup(name: str) -> tuple[str, bool]:
        for layer in layers:
            value, found = layer(name)
            if found:
                return value, True
        return "", False

    return lookup


__all__ = ["LookupFunc", "dotenv_lookup", "lookup_env", "mapping_lookup"]
