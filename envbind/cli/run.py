from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import os
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml

from envbind.core.binder import DEFAULT_PREFIX, Binder
from envbind.core.coercer import zero_value
from envbind.core.errors import SECRET_MASK, BindError
from envbind.core.fields import field_specs, is_record_type
from envbind.core.log_bridge import configure_logging, log_printf
from envbind.core.lookup import LookupFunc, dotenv_lookup, lookup_env
from envbind.core.version import get_envbind_version


class TargetError(Exception):
    """The TARGET argument does not name an importable dataclass."""


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="envbind",
        description="Load a dataclass from environment variables and print the result.",
    )
    parser.add_argument(
        "target",
        help="Dataclass to load, as 'package.module:ClassName'.",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        default=os.environ.get("ENVBIND_PREFIX", DEFAULT_PREFIX),
        help="Prefix prepended to every variable name (defaults to $ENVBIND_PREFIX or APP_).",
    )
    parser.add_argument(
        "-e",
        "--env-file",
        type=Path,
        help="Read variables from this .env file beneath the process environment.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format of the loaded record.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("ENVBIND_LOG_LEVEL", "info"),
        help="Log level for messages written to stderr.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not log each populated field.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_envbind_version()}",
    )
    return parser.parse_args(argv)


def _import_target(target: str) -> type:
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise TargetError(f"target must look like 'package.module:ClassName', received {target!r}")

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"cannot import {module_name}: {exc}") from exc

    cls = getattr(module, class_name, None)
    if not is_record_type(cls):
        raise TargetError(f"{target} is not a dataclass")
    return cls


def _resolve_lookup(env_file: Path | None) -> LookupFunc:
    if env_file is None:
        return lookup_env
    if not env_file.is_file():
        raise FileNotFoundError(env_file)
    return dotenv_lookup(env_file)


def _masked(record: Any) -> dict[str, Any]:
    """Plain-data view of ``record`` with secret fields replaced by the mask."""
    result: dict[str, Any] = {}
    for spec in field_specs(type(record)):
        value = getattr(record, spec.attr, None)
        if spec.nested and value is not None:
            result[spec.attr] = _masked(value)
        elif spec.secret:
            result[spec.attr] = SECRET_MASK
        else:
            result[spec.attr] = _plain(value)
    return result


def _plain(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _masked(value)
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _render(data: dict[str, Any], fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    try:
        cls = _import_target(args.target)
        binder = Binder(
            args.prefix,
            None if args.quiet else log_printf,
            lookup=_resolve_lookup(args.env_file),
        )
        record = binder.load(zero_value(cls))
    except (BindError, TargetError) as exc:
        print(exc, file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"env file not found: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    sys.stdout.write(_render(_masked(record), args.format))
    return 0


__all__ = ["main"]


if __name__ == "__main__":
    sys.exit(main())
