# topmark:header:start
#
#   project      : ShellConf
#   file         : test_mutator.py
#   file_relpath : tests/runtime/test_mutator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `set`/`reset` write-back through a running engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import tomlkit

from shellconf.core.errors import (
    ConfigValidationError,
    ConstraintViolationError,
    PathNotFoundError,
    PathSyntaxError,
    TypeMismatchError,
)
from shellconf.runtime.mutator import parse_literal
from shellconf.schema.model import SchemaKind
from tests.conftest import parametrize

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from shellconf.runtime.engine import ConfigEngine
    from tests.conftest import WriteDoc

    MakeEngine = Callable[..., ConfigEngine]

ROOT_DOC: str = """
# Desktop shell configuration
imports = ["@bar.toml"]

[general]
font = "Inter" # the UI font
"""

BAR_DOC: str = """
# Bar settings
[bar]
location = "top"   # edge of the screen
scale = 1.0
modules = ["clock", "battery"]
"""


@pytest.fixture
def engine(make_engine: MakeEngine, write_doc: WriteDoc) -> ConfigEngine:
    """Return an engine over a root document importing ``bar.toml``."""
    write_doc("config.toml", ROOT_DOC)
    write_doc("bar.toml", BAR_DOC)
    return make_engine()


def _read(path: Path) -> dict[str, Any]:
    return tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()


@parametrize(
    "literal, kind, expected",
    [
        ("2.5", SchemaKind.NUMBER, 2.5),
        ("3", SchemaKind.NUMBER, 3),
        ("true", SchemaKind.BOOL, True),
        ('["a", "b"]', SchemaKind.ARRAY, ["a", "b"]),
        ("bottom", SchemaKind.ENUM, "bottom"),
        ('"bottom"', SchemaKind.ENUM, "bottom"),
        ("Fira Sans", SchemaKind.STRING, "Fira Sans"),
        ("42", SchemaKind.STRING, "42"),
    ],
)
def test_parse_literal(literal: str, kind: SchemaKind, expected: Any) -> None:
    """Literals are TOML values; strings and enums also take bare text."""
    assert parse_literal(literal, kind) == expected


@parametrize("literal", ["abc", "1 = 2", "[1,", ""])
def test_parse_literal_rejects_non_values(literal: str) -> None:
    """Non-textual kinds need a single valid TOML value."""
    with pytest.raises(ValueError):
        parse_literal(literal, SchemaKind.NUMBER)


def test_set_updates_owning_file(engine: ConfigEngine, config_dir: Path) -> None:
    """The edit lands in the document that owns the key, and the reload publishes it."""
    root_before: str = (config_dir / "config.toml").read_text(encoding="utf-8")
    snapshot = engine.set("bar.location", "bottom")
    assert snapshot.version == 2
    assert snapshot.value("bar.location") == "bottom"
    assert engine.get("bar.location") == "bottom"
    assert _read(config_dir / "bar.toml")["bar"]["location"] == "bottom"
    assert (config_dir / "config.toml").read_text(encoding="utf-8") == root_before


def test_set_preserves_comments(engine: ConfigEngine, config_dir: Path) -> None:
    """Comments and untouched keys survive the write-back."""
    engine.set("bar.scale", "1.25")
    text: str = (config_dir / "bar.toml").read_text(encoding="utf-8")
    assert "# Bar settings" in text
    assert "# edge of the screen" in text
    assert 'modules = ["clock", "battery"]' in text
    assert "scale = 1.25" in text


def test_rejected_set_touches_nothing(engine: ConfigEngine, config_dir: Path) -> None:
    """A constraint violation raises before any write or reload."""
    before: str = (config_dir / "bar.toml").read_text(encoding="utf-8")
    with pytest.raises(ConstraintViolationError) as excinfo:
        engine.set("bar.location", "sideways")
    assert excinfo.value.path == "bar.location"
    assert (config_dir / "bar.toml").read_text(encoding="utf-8") == before
    assert engine.current().version == 1


@parametrize(
    "path, literal, error",
    [
        ("bar.scale", "big", TypeMismatchError),
        ("bar.scale", "9", ConstraintViolationError),
        ("bar.scale", "nan", ConstraintViolationError),
        ("bar.scale", "inf", ConstraintViolationError),
        ("bar.scale", "-inf", ConstraintViolationError),
        ("bar.enabled", '"yes"', TypeMismatchError),
        ("bar", "1", TypeMismatchError),
        ("bar.height", "30", PathNotFoundError),
        ("bar.modules[7]", "volume", PathNotFoundError),
        ("bar..scale", "1", PathSyntaxError),
        ("general.accent", "blue", ConstraintViolationError),
    ],
)
def test_invalid_sets(engine: ConfigEngine, path: str, literal: str, error: type) -> None:
    """Every rejected set raises synchronously and keeps the version."""
    with pytest.raises(error):
        engine.set(path, literal)
    assert engine.current().version == 1


@parametrize(
    "path, value",
    [
        ("bar.scale", 2.5),
        ("bar.enabled", False),
        ("bar.location", "left"),
        ("bar.modules", ["workspaces"]),
        ("general.font", "Noto Sans"),
        ("general.accent", "#ffffff"),
    ],
)
def test_set_then_get(engine: ConfigEngine, path: str, value: Any) -> None:
    """Setting a valid value makes `get` return it."""
    engine.set_value(path, value)
    assert engine.get(path) == value


def test_set_default_leaf_writes_root(engine: ConfigEngine, config_dir: Path) -> None:
    """A leaf without provenance is written to the root document."""
    engine.set("general.accent", '"#a6e3a1"')
    assert _read(config_dir / "config.toml")["general"]["accent"] == "#a6e3a1"
    assert engine.provenance("general.accent") == config_dir / "config.toml"
    assert "# the UI font" in (config_dir / "config.toml").read_text(encoding="utf-8")


def test_set_array_element(engine: ConfigEngine, config_dir: Path) -> None:
    """An element edit rewrites the owning array in place."""
    engine.set("bar.modules[1]", "volume")
    assert engine.get("bar.modules") == ["clock", "volume"]
    assert _read(config_dir / "bar.toml")["bar"]["modules"] == ["clock", "volume"]


def test_set_element_kind_is_checked(engine: ConfigEngine) -> None:
    """Element values are checked against the array's item kind."""
    with pytest.raises(TypeMismatchError) as excinfo:
        engine.set_value("bar.modules[0]", 5)
    assert excinfo.value.path == "bar.modules[0]"


def test_set_is_preflighted(make_engine: MakeEngine, write_doc: WriteDoc, config_dir: Path) -> None:
    """An edit that would still leave the configuration invalid is not written."""
    write_doc("config.toml", '[bar]\nlocation = "top"\n[foo]\nbar = 1\n')
    engine = make_engine()
    before: str = (config_dir / "config.toml").read_text(encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        engine.set("bar.location", "left")
    assert (config_dir / "config.toml").read_text(encoding="utf-8") == before


def test_reset_falls_through(make_engine: MakeEngine, write_doc: WriteDoc) -> None:
    """Resetting the winning value exposes the next source, then the default."""
    write_doc("config.toml", 'imports = ["@bar.toml"]\n[bar]\nscale = 3\n')
    write_doc("bar.toml", "[bar]\nscale = 2\n")
    engine = make_engine()
    assert engine.reset("bar.scale").value("bar.scale") == 2
    assert engine.reset("bar.scale").value("bar.scale") == 1.0
    assert engine.provenance("bar.scale") is None


def test_reset_is_idempotent(engine: ConfigEngine, config_dir: Path) -> None:
    """A second reset of a defaulted key changes nothing."""
    once = engine.reset("bar.location")
    assert once.value("bar.location") == "top"
    assert "location" not in _read(config_dir / "bar.toml")["bar"]
    twice = engine.reset("bar.location")
    assert twice.version == once.version
    assert twice.to_dict() == once.to_dict()


def test_reset_table(engine: ConfigEngine, config_dir: Path) -> None:
    """Resetting a table removes every owned leaf below it."""
    snapshot = engine.reset("bar")
    assert snapshot.value("bar") == {
        "location": "top",
        "scale": 1.0,
        "enabled": True,
        "modules": ["clock"],
    }
    assert _read(config_dir / "bar.toml") == {"bar": {}}
    assert engine.get("general.font") == "Inter"


def test_reset_element_is_rejected(engine: ConfigEngine) -> None:
    """Array elements cannot be reset individually."""
    with pytest.raises(PathSyntaxError):
        engine.reset("bar.modules[0]")


def test_set_notifies_subscribers(engine: ConfigEngine) -> None:
    """The reload triggered by a set reaches subscribers before `set` returns."""
    sub = engine.subscribe("bar.location")
    engine.set("bar.location", "right")
    [event] = sub.pending()
    assert event.value == "right"
    assert event.version == 2
