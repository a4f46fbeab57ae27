# topmark:header:start
#
#   project      : ShellConf
#   file         : test_dotpath.py
#   file_relpath : tests/unit/test_dotpath.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for dotted path parsing and resolution in `shellconf.dotpath`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shellconf.core.errors import PathNotFoundError, PathSyntaxError
from shellconf.dotpath import format_path, lookup, parse_path, resolve_path
from shellconf.merge import merge
from shellconf.schema.model import SchemaKind
from shellconf.schema.validator import validate
from tests.conftest import parametrize

if TYPE_CHECKING:
    from shellconf.schema.model import SchemaNode


@parametrize(
    "text, segments",
    [
        ("", ()),
        ("bar", ("bar",)),
        ("bar.location", ("bar", "location")),
        ("bar.modules[2]", ("bar", "modules", 2)),
        ("general.font-size", ("general", "font-size")),
        ("_x.y_1", ("_x", "y_1")),
    ],
)
def test_parse_and_format(text: str, segments: tuple) -> None:
    """Valid paths parse into segments and format back to the same text."""
    assert parse_path(text) == segments
    assert format_path(segments) == text


@parametrize(
    "text",
    [".bar", "bar.", "bar..x", "1bar", "bar[x]", "bar[-1]", "bar[0", "bar baz", "[0]"],
)
def test_parse_rejects_malformed(text: str) -> None:
    """Malformed paths raise `PathSyntaxError`."""
    with pytest.raises(PathSyntaxError):
        parse_path(text)


def test_resolve_path(schema: SchemaNode) -> None:
    """Resolution records the key segments, node and index."""
    root = resolve_path(schema, "")
    assert root.keys == ()
    assert root.node.kind is SchemaKind.TABLE

    element = resolve_path(schema, "bar.modules[1]")
    assert element.keys == ("bar", "modules")
    assert element.index == 1
    assert element.key_path == "bar.modules"
    assert element.node.kind is SchemaKind.ARRAY


@parametrize(
    "text",
    ["foo", "bar.foo", "bar.location[0]", "bar[0]", "bar.location.x", "bar.modules[0].x"],
)
def test_resolve_unknown_paths(schema: SchemaNode, text: str) -> None:
    """Unknown keys and misplaced indices raise `PathNotFoundError`."""
    with pytest.raises(PathNotFoundError):
        resolve_path(schema, text)


def test_lookup_element_range(schema: SchemaNode) -> None:
    """Element lookups return the item or report an out-of-range index."""
    tree = validate(merge([]), schema)
    assert lookup(tree, resolve_path(schema, "bar.modules[0]")) == "clock"
    with pytest.raises(PathNotFoundError, match="out of range"):
        lookup(tree, resolve_path(schema, "bar.modules[1]"))
