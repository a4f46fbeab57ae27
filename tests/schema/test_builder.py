# topmark:header:start
#
#   project      : ShellConf
#   file         : test_builder.py
#   file_relpath : tests/schema/test_builder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for building the schema tree from its entry list."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from shellconf.core.errors import SchemaDefinitionError
from shellconf.schema.builder import (
    build_schema,
    load_default_schema,
    load_schema,
    parse_schema_text,
)
from shellconf.schema.model import SchemaKind
from tests.conftest import TEST_SCHEMA_ENTRIES, parametrize

if TYPE_CHECKING:
    from pathlib import Path


def test_build_schema_tree(schema: Any) -> None:
    """Entries become a tree with implicit tables for unlisted parents."""
    assert list(schema.children) == ["bar", "general"]
    bar = schema.child("bar")
    assert bar.kind is SchemaKind.TABLE
    assert bar.description == "The bar."
    general = schema.child("general")
    assert general.kind is SchemaKind.TABLE
    assert general.description == ""

    location = bar.child("location")
    assert location.path == "bar.location"
    assert location.default == "top"
    assert location.constraints.choices == ("top", "bottom", "left", "right")

    modules = bar.child("modules")
    assert modules.items is SchemaKind.STRING
    assert modules.default == ("clock",)


def test_explicit_table_after_children_is_accepted() -> None:
    """A table entry may follow the entries that implicitly created it."""
    schema = build_schema(
        [
            {"path": "bar.scale", "kind": "number", "default": 1},
            {"path": "bar", "kind": "table", "description": "Bar"},
        ]
    )
    assert schema.child("bar").description == "Bar"


@parametrize(
    "entries, message",
    [
        ([{"path": "bar..x", "kind": "string", "default": ""}], "dotted identifier"),
        ([{"path": "x", "kind": "color", "default": ""}], "unknown kind"),
        ([{"path": "x", "kind": "string", "default": "", "color": 1}], "unknown entry key"),
        ([{"path": "x", "kind": "string"}], "need a 'default'"),
        ([{"path": "x", "kind": "table", "default": {}}], "from children"),
        ([{"path": "x", "kind": "string", "default": "", "minimum": 1}], "not allowed"),
        ([{"path": "x", "kind": "number", "default": 1, "minimum": 2, "maximum": 1}], "greater"),
        ([{"path": "x", "kind": "enum", "default": "a"}], "choices"),
        ([{"path": "x", "kind": "enum", "default": "a", "choices": []}], "choices"),
        ([{"path": "x", "kind": "string", "default": "a", "pattern": "("}], "invalid 'pattern'"),
        ([{"path": "x", "kind": "array", "default": [], "items": "table"}], "'items'"),
        ([{"path": "x", "kind": "number", "default": 9, "maximum": 4}], "invalid default"),
        ([{"path": "x", "kind": "bool", "default": "yes"}], "invalid default"),
        ([{"path": "x", "kind": "enum", "default": "z", "choices": ["a"]}], "invalid default"),
        (
            [
                {"path": "x", "kind": "string", "default": ""},
                {"path": "x", "kind": "string", "default": ""},
            ],
            "more than once",
        ),
        (
            [
                {"path": "x", "kind": "string", "default": ""},
                {"path": "x.y", "kind": "string", "default": ""},
            ],
            "not a table",
        ),
    ],
)
def test_malformed_entries(entries: list[dict[str, Any]], message: str) -> None:
    """Each malformed entry is rejected with a specific reason."""
    with pytest.raises(SchemaDefinitionError, match=message):
        build_schema(entries)


def test_parse_schema_text_toml_and_json() -> None:
    """The same entry list loads from TOML and JSON."""
    toml_text: str = '[[field]]\npath = "a"\nkind = "bool"\ndefault = true\n'
    json_text: str = json.dumps({"field": [{"path": "a", "kind": "bool", "default": True}]})
    from_toml = parse_schema_text(toml_text, origin="s.toml")
    from_json = parse_schema_text(json_text, origin="s.json", fmt="json")
    assert from_toml.child("a") == from_json.child("a")


@parametrize(
    "text, fmt",
    [("[[field]\n", "toml"), ("{", "json"), ("[]", "json"), ("field = 1\n", "toml")],
)
def test_parse_schema_text_rejects_broken_documents(text: str, fmt: str) -> None:
    """Unparsable documents and documents without a field list are definition errors."""
    with pytest.raises(SchemaDefinitionError):
        parse_schema_text(text, origin="broken", fmt=fmt)


def test_load_schema_by_suffix(tmp_path: Path) -> None:
    """`.json` files are read as JSON, everything else as TOML."""
    path: Path = tmp_path / "schema.json"
    path.write_text(json.dumps({"field": TEST_SCHEMA_ENTRIES}), encoding="utf-8")
    assert load_schema(path) == build_schema(TEST_SCHEMA_ENTRIES)


def test_default_schema_loads() -> None:
    """The packaged shell schema is well formed and covers the bar."""
    schema = load_default_schema()
    bar = schema.child("bar")
    assert bar is not None
    location = bar.child("location")
    assert location is not None
    assert location.kind is SchemaKind.ENUM
    assert location.default == "top"
    assert bar.child("scale").default == 1.0
