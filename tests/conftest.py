from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional

import pytest


@dataclass
class RecordingLookup:
    values: Dict[str, str] = field(default_factory=dict)
    queried: list[str] = field(default_factory=list)

    def __call__(self, name: str) -> tuple[str, bool]:
        self.queried.append(name)
        if name in self.values:
            return self.values[name], True
        return "", False


@dataclass
class LogCalls:
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def __call__(self, format: str, *args: Any) -> None:
        self.calls.append((format, args))

    @property
    def messages(self) -> list[str]:
        return [format % args for format, args in self.calls]


@pytest.fixture
def recording_lookup() -> Callable[..., RecordingLookup]:
    def factory(values: Optional[Dict[str, str]] = None, **kwargs: str) -> RecordingLookup:
        merged = dict(values or {})
        merged.update(kwargs)
        return RecordingLookup(values=merged)

    return factory


@pytest.fixture
def log_calls() -> LogCalls:
    return LogCalls()


@pytest.fixture
def config_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    def apply(**env: Any) -> None:
        for key, value in env.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, str(value))

    return apply


@pytest.fixture
def reset_structlog() -> Iterable[None]:
    import structlog

    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    structlog.reset_defaults()
    yield
    structlog.reset_defaults()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

