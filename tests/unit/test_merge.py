# topmark:header:start
#
#   project      : ShellConf
#   file         : test_merge.py
#   file_relpath : tests/unit/test_merge.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the deep merge in `shellconf.merge`."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any

import pytest

from shellconf.io.types import ConfigSource
from shellconf.merge import MergedLeaf, MergedTable, freeze_value, iter_leaves, merge, thaw

A = Path("/cfg/a.toml")
B = Path("/cfg/b.toml")


def _src(path: Path, table: dict[str, Any]) -> ConfigSource:
    return ConfigSource(path=path, table=table)


def test_later_document_wins_per_leaf() -> None:
    """Leaves are overridden individually and provenance follows the winner."""
    tree: MergedTable = merge(
        [
            _src(A, {"bar": {"location": "top", "scale": 1.0}}),
            _src(B, {"bar": {"location": "bottom"}}),
        ]
    )
    assert thaw(tree) == {"bar": {"location": "bottom", "scale": 1.0}}
    leaves: dict[str, MergedLeaf] = dict(iter_leaves(tree))
    assert leaves["bar.location"].provenance == B
    assert leaves["bar.scale"].provenance == A


def test_arrays_replace_instead_of_concatenating() -> None:
    """Arrays are leaves: the later array replaces the earlier one outright."""
    tree = merge([_src(A, {"modules": ["clock", "battery"]}), _src(B, {"modules": ["volume"]})])
    assert thaw(tree) == {"modules": ["volume"]}


def test_table_and_scalar_replace_each_other() -> None:
    """A table may replace a scalar and a scalar may replace a table."""
    tree = merge([_src(A, {"bar": 1, "general": {"font": "x"}}), _src(B, {"bar": {"x": 1}})])
    assert thaw(tree) == {"bar": {"x": 1}, "general": {"font": "x"}}
    tree = merge([_src(A, {"bar": {"x": 1}}), _src(B, {"bar": 2})])
    assert thaw(tree) == {"bar": 2}


def test_key_order_follows_first_appearance() -> None:
    """Merged key order is deterministic."""
    tree = merge([_src(A, {"b": 1, "a": 1}), _src(B, {"c": 1, "b": 2})])
    assert list(tree.children) == ["b", "a", "c"]


def test_empty_merge() -> None:
    """No documents yield an empty table."""
    assert thaw(merge([])) == {}


def test_frozen_values_are_immutable() -> None:
    """Arrays become tuples and inline tables read-only mappings."""
    frozen: Any = freeze_value({"a": [1, {"b": 2}]})
    assert isinstance(frozen, MappingProxyType)
    assert frozen["a"][0] == 1
    assert isinstance(frozen["a"], tuple)
    with pytest.raises(TypeError):
        frozen["a"] = 1  # type: ignore[index]
    assert thaw(frozen) == {"a": [1, {"b": 2}]}


def test_source_tables_are_not_mutated() -> None:
    """Merging never modifies the input documents."""
    table: dict[str, Any] = {"bar": {"modules": ["clock"]}}
    merge([_src(A, table), _src(B, {"bar": {"modules": []}})])
    assert table == {"bar": {"modules": ["clock"]}}
