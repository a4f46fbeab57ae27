# topmark:header:start
#
#   project      : ShellConf
#   file         : model.py
#   file_relpath : src/shellconf/schema/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Schema node model.

The schema is static input to the engine: a tree of
[`SchemaNode`][shellconf.schema.model.SchemaNode] objects built once at startup by
[`shellconf.schema.builder`][shellconf.schema.builder] and never mutated afterwards.

Kinds:
    ``string``, ``number``, ``bool``, ``array``, ``table`` and ``enum``. Every
    non-table node is a *leaf* and carries a default value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class SchemaKind(str, Enum):
    """Kind of a schema node."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    ARRAY = "array"
    TABLE = "table"
    ENUM = "enum"

    @property
    def is_leaf(self) -> bool:
        """Whether nodes of this kind are leaves (everything but tables)."""
        return self is not SchemaKind.TABLE

    @classmethod
    def parse(cls, raw: str) -> SchemaKind | None:
        """Return the kind for ``raw`` (case-insensitive), or ``None`` if unknown."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


# Kinds allowed as array element kinds.
ITEM_KINDS: frozenset[SchemaKind] = frozenset(
    {SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.BOOL},
)


@dataclass(frozen=True, slots=True)
class Constraints:
    """Optional constraints of a leaf node.

    Attributes:
        minimum (float | None): Inclusive lower bound for numbers.
        maximum (float | None): Inclusive upper bound for numbers.
        choices (tuple[str, ...] | None): Allowed values for enums.
        pattern (str | None): Regular expression a string must fully match.
    """

    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] | None = None
    pattern: str | None = None


@dataclass(frozen=True, slots=True)
class SchemaNode:
    """One node of the schema tree.

    Attributes:
        kind (SchemaKind): The node kind.
        path (str): Dotted path of the node (``""`` for the root).
        default (Any): Default value for leaves (deep-frozen); ``None`` for tables.
        description (str): Human-readable description.
        constraints (Constraints): Declared constraints.
        items (SchemaKind | None): Element kind for arrays, if declared.
        children (Mapping[str, SchemaNode]): Child nodes of a table, in declaration order.
    """

    kind: SchemaKind
    path: str = ""
    default: Any = None
    description: str = ""
    constraints: Constraints = field(default_factory=Constraints)
    items: SchemaKind | None = None
    children: Mapping[str, SchemaNode] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    @property
    def is_leaf(self) -> bool:
        """Whether this node is a leaf."""
        return self.kind.is_leaf

    def child(self, key: str) -> SchemaNode | None:
        """Return the child node for ``key``, or ``None`` if absent."""
        return self.children.get(key)

    def walk(self) -> list[SchemaNode]:
        """Return this node and all descendants in declaration order (pre-order)."""
        out: list[SchemaNode] = [self]
        for child in self.children.values():
            out.extend(child.walk())
        return out
