# topmark:header:start
#
#   project      : ShellConf
#   file         : merge.py
#   file_relpath : src/shellconf/merge.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Merged configuration tree and merge policy.

This module defines:
    - `MergedLeaf`: a scalar or array value plus its provenance (the owning document)
      and, once validated, the schema node it was checked against.
    - `MergedTable`: a table node whose children are merged nodes.
    - `merge()`: fold ordered documents into one tree.

Merge policy:
    - Documents are applied in resolver order; for each leaf the later document wins and
      provenance moves to it.
    - Table-valued keys merge structurally (recurse); arrays and scalars replace the
      earlier value outright, never concatenated. A table may replace a scalar and a
      scalar may replace a table.
    - Key order follows first appearance, so identical input always yields an identical
      tree.

Immutability:
    Trees are built from frozen dataclasses; leaf values are deep-frozen (arrays become
    tuples, inline tables become read-only mappings). Use `thaw()` to get plain Python
    data back out.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, NamedTuple

from shellconf.core.logging import get_logger
from shellconf.io.guards import is_toml_table

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger
    from shellconf.io.types import ConfigSource, TomlTable
    from shellconf.schema.model import SchemaNode

logger: ShellconfLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MergedLeaf:
    """A leaf of the merged tree.

    Attributes:
        value (Any): Deep-frozen value.
        provenance (Path | None): Canonical path of the document supplying the value;
            ``None`` when the value is a schema default.
        schema (SchemaNode | None): Schema node the leaf was validated against.
    """

    value: Any
    provenance: Path | None
    schema: SchemaNode | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class MergedTable:
    """A table of the merged tree."""

    children: Mapping[str, MergedNode]
    schema: SchemaNode | None = field(default=None, compare=False, repr=False)

    def get(self, key: str) -> MergedNode | None:
        """Return the child node for ``key``, or ``None``."""
        return self.children.get(key)


MergedNode = MergedLeaf | MergedTable

EMPTY_TABLE = MergedTable(children=MappingProxyType({}))


def freeze_value(value: Any) -> Any:
    """Deep-freeze a parsed TOML value (lists to tuples, dicts to read-only mappings)."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Convert a frozen value or merged node back into plain Python data.

    Args:
        value (Any): A `MergedNode`, or a frozen value.

    Returns:
        Any: ``dict`` for tables, ``list`` for arrays, scalars unchanged.
    """
    if isinstance(value, MergedTable):
        return {k: thaw(child) for k, child in value.children.items()}
    if isinstance(value, MergedLeaf):
        return thaw(value.value)
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


class _DraftLeaf(NamedTuple):
    value: Any
    provenance: Path


def _merge_into(draft: dict[str, Any], table: TomlTable, provenance: Path) -> None:
    for key, value in table.items():
        if is_toml_table(value):
            existing: Any = draft.get(key)
            if not isinstance(existing, dict):
                existing = {}
                draft[key] = existing
            _merge_into(existing, value, provenance)
        else:
            draft[key] = _DraftLeaf(freeze_value(value), provenance)


def _freeze_draft(draft: dict[str, Any]) -> MergedTable:
    children: dict[str, MergedNode] = {}
    for key, value in draft.items():
        if isinstance(value, _DraftLeaf):
            children[key] = MergedLeaf(value=value.value, provenance=value.provenance)
        else:
            children[key] = _freeze_draft(value)
    return MergedTable(children=MappingProxyType(children))


def merge(documents: Iterable[ConfigSource]) -> MergedTable:
    """Deep-merge ordered documents into one tree.

    Args:
        documents (Iterable[ConfigSource]): Documents in resolver order (lowest priority
            first).

    Returns:
        MergedTable: The merged tree; leaves carry the path of the document that wrote
        them last.
    """
    draft: dict[str, Any] = {}
    count: int = 0
    for source in documents:
        _merge_into(draft, source.table, source.path)
        count += 1
    tree: MergedTable = _freeze_draft(draft)
    logger.trace("Merged %d document(s) into %d top-level key(s)", count, len(tree.children))
    return tree


def iter_leaves(node: MergedNode, prefix: str = "") -> Iterator[tuple[str, MergedLeaf]]:
    """Yield ``(dotted_path, leaf)`` for every leaf below ``node`` in tree order."""
    if isinstance(node, MergedLeaf):
        yield prefix, node
        return
    for key, child in node.children.items():
        path: str = f"{prefix}.{key}" if prefix else key
        yield from iter_leaves(child, path)
