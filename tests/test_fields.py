from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import pytest

from envbind.core import fields
from envbind.core.fields import env_field, field_specs, parse_tag, resolve_hints, to_upper_snake, unwrap_optional
from envbind.core.types import Int8

if TYPE_CHECKING:
    from decimal import Decimal


@dataclass
class Inner:
    url: str = ""


@dataclass
class Tagged:
    host: str = ""
    dbHost: str = ""
    password: str = field(default="", metadata={"env": ",secret"})
    token: str = field(default="", metadata={"env": "API_TOKEN,secret"})
    ignored: str = field(default="", metadata={"env": "-"})
    inner: Inner = field(default_factory=Inner, metadata={"prefix": "INNER_"})
    maybe: Optional[Inner] = None
    retries: Optional[Int8] = None
    _private: str = ""


@dataclass
class Partial:
    host: str = ""
    ratio: Optional[Decimal] = None
    inner: Inner = field(default_factory=Inner)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Host", "HOST"),
        ("dbHost", "DB_HOST"),
        ("db_host", "DB_HOST"),
        ("APIHost", "APIHOST"),
        ("myAPIKey", "MY_APIKEY"),
        ("URL", "URL"),
        ("already_Snake", "ALREADY_SNAKE"),
        ("version2Beta", "VERSION2_BETA"),
    ],
)
def test_to_upper_snake(name: str, expected: str) -> None:
    assert to_upper_snake(name) == expected


def test_parse_tag_variants() -> None:
    assert parse_tag("", "dbHost") == ("DB_HOST", False)
    assert parse_tag(",secret", "password") == ("PASSWORD", True)
    assert parse_tag("PASS,secret", "password") == ("PASS", True)
    assert parse_tag("CUSTOM", "host") == ("CUSTOM", False)
    assert parse_tag("-", "host") == ("-", False)


def test_unwrap_optional() -> None:
    assert unwrap_optional(Optional[int]) == (int, True)
    assert unwrap_optional(int | None) == (int, True)
    assert unwrap_optional(int) == (int, False)
    assert unwrap_optional(int | str) == (int | str, False)


def test_field_specs_follow_declaration_order_and_skip_private() -> None:
    specs = field_specs(Tagged)

    assert [spec.attr for spec in specs] == [
        "host",
        "dbHost",
        "password",
        "token",
        "ignored",
        "inner",
        "maybe",
        "retries",
    ]


def test_field_specs_describe_tags_and_nesting() -> None:
    specs = {spec.attr: spec for spec in field_specs(Tagged)}

    assert specs["dbHost"].name == "DB_HOST"
    assert specs["password"].name == "PASSWORD" and specs["password"].secret
    assert specs["token"].name == "API_TOKEN" and specs["token"].secret
    assert specs["ignored"].skip
    assert specs["inner"].nested and specs["inner"].prefix == "INNER_"
    assert specs["maybe"].nested and specs["maybe"].optional and specs["maybe"].target is Inner
    assert not specs["retries"].nested and specs["retries"].target is Int8
    assert not specs["host"].nested and specs["host"].prefix == ""


def test_field_specs_are_cached() -> None:
    assert field_specs(Tagged) is field_specs(Tagged)


def test_tag_name_can_be_changed(monkeypatch: pytest.MonkeyPatch) -> None:
    @dataclass
    class Alt:
        host: str = field(default="", metadata={"cfg": "ALT_HOST"})

    monkeypatch.setattr(fields, "TAG_NAME", "cfg")

    assert field_specs(Alt)[0].name == "ALT_HOST"


def test_env_field_builds_metadata() -> None:
    @dataclass
    class Built:
        password: str = env_field("DB_PASS", secret=True, default="")
        hidden: str = env_field(skip=True, default="")
        nested: Inner = env_field(prefix="N_", default_factory=Inner)
        plain: str = env_field(default="x", metadata={"doc": "kept"})

    specs = {spec.attr: spec for spec in field_specs(Built)}

    assert specs["password"].name == "DB_PASS" and specs["password"].secret
    assert specs["hidden"].skip
    assert specs["nested"].prefix == "N_"
    assert specs["plain"].name == "PLAIN"
    assert Built().plain == "x"


def test_env_field_rejects_skip_with_name() -> None:
    with pytest.raises(ValueError):
        env_field("NAME", skip=True)


def test_resolve_hints_falls_back_field_by_field() -> None:
    specs = {spec.attr: spec for spec in field_specs(Partial)}

    assert specs["host"].target is str
    assert specs["inner"].nested and specs["inner"].target is Inner
    assert specs["ratio"].hint == "Optional[Decimal]"
    assert not specs["ratio"].nested


def test_local_annotations_use_the_default_type() -> None:
    @dataclass
    class LocalInner:
        url: str = ""

    @dataclass
    class LocalOuter:
        inner: LocalInner = field(default_factory=LocalInner)
        count: int = 0

    hints = resolve_hints(LocalOuter)

    assert hints == {"inner": LocalInner, "count": int}
