# topmark:header:start
#
#   project      : ShellConf
#   file         : dotpath.py
#   file_relpath : src/shellconf/dotpath.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Dotted configuration paths.

Grammar:

```text
path  := "" | ident ( "." ident | "[" int "]" )*
ident := [A-Za-z_][A-Za-z0-9_-]*
```

The empty path designates the root table. Keys must name children of table nodes and
indices need an array node; arrays only hold scalars, so an index is always the last
segment of a path that resolves.

Functions:
    - `parse_path()`: text to segments (``str`` keys, ``int`` indices).
    - `format_path()`: segments back to canonical text.
    - `resolve_path()`: check a path against the schema.
    - `lookup()`: fetch the node (or array element) a resolved path designates in a
      validated tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shellconf.constants import IDENT_PATTERN
from shellconf.core.errors import PathNotFoundError, PathSyntaxError
from shellconf.merge import MergedLeaf, MergedTable
from shellconf.schema.model import SchemaKind

if TYPE_CHECKING:
    from shellconf.merge import MergedNode
    from shellconf.schema.model import SchemaNode

Segment = str | int

_TOKEN_RE: re.Pattern[str] = re.compile(rf"\.(?P<key>{IDENT_PATTERN})|\[(?P<index>[0-9]+)\]")
_HEAD_RE: re.Pattern[str] = re.compile(IDENT_PATTERN)


def parse_path(path: str) -> tuple[Segment, ...]:
    """Split a dotted path into key and index segments.

    Args:
        path (str): Path text such as ``bar.layout.left[0]``.

    Returns:
        tuple[Segment, ...]: Segments; empty for the root path.

    Raises:
        PathSyntaxError: If the text does not follow the path grammar.
    """
    if path == "":
        return ()
    head = _HEAD_RE.match(path)
    if head is None:
        raise PathSyntaxError(path, "a path must start with an identifier")
    segments: list[Segment] = [head.group(0)]
    pos: int = head.end()
    while pos < len(path):
        m = _TOKEN_RE.match(path, pos)
        if m is None:
            raise PathSyntaxError(path, f"unexpected {path[pos]!r} at offset {pos}")
        key: str | None = m.group("key")
        segments.append(key if key is not None else int(m.group("index")))
        pos = m.end()
    return tuple(segments)


def format_path(segments: tuple[Segment, ...] | list[Segment]) -> str:
    """Render segments as canonical path text."""
    out: str = ""
    for seg in segments:
        if isinstance(seg, int):
            out += f"[{seg}]"
        else:
            out = f"{out}.{seg}" if out else seg
    return out


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """A path checked against the schema.

    Attributes:
        text (str): Canonical path text.
        keys (tuple[str, ...]): Key segments (the document keys to edit).
        node (SchemaNode): Schema node of the last key (the array node for element
            paths).
        index (int | None): Array index for element paths.
    """

    text: str
    keys: tuple[str, ...]
    node: SchemaNode
    index: int | None = None

    @property
    def key_path(self) -> str:
        """Dotted path of the key segments (the owning array for element paths)."""
        return ".".join(self.keys)


def resolve_path(schema: SchemaNode, path: str) -> ResolvedPath:
    """Parse ``path`` and resolve it against the schema.

    Args:
        schema (SchemaNode): Root schema node.
        path (str): Path text.

    Returns:
        ResolvedPath: The resolved path.

    Raises:
        PathSyntaxError: If the text does not follow the grammar.
        PathNotFoundError: If a key has no schema node or an index is applied to a
            non-array node.
    """
    segments: tuple[Segment, ...] = parse_path(path)
    node: SchemaNode = schema
    keys: list[str] = []
    index: int | None = None
    for pos, seg in enumerate(segments):
        if index is not None:
            raise PathNotFoundError(path, "array elements have no children")
        if isinstance(seg, int):
            if node.kind is not SchemaKind.ARRAY:
                raise PathNotFoundError(path, f"'{format_path(segments[:pos])}' is not an array")
            index = seg
            continue
        if node.kind is not SchemaKind.TABLE:
            raise PathNotFoundError(path, f"'{format_path(segments[:pos])}' is not a table")
        child: SchemaNode | None = node.child(seg)
        if child is None:
            raise PathNotFoundError(path)
        node = child
        keys.append(seg)
    return ResolvedPath(text=format_path(segments), keys=tuple(keys), node=node, index=index)


def lookup_node(root: MergedTable, resolved: ResolvedPath) -> MergedNode:
    """Return the tree node for the key segments of ``resolved`` (ignoring any index).

    Raises:
        PathNotFoundError: If the tree has no node at the path.
    """
    node: MergedNode = root
    for key in resolved.keys:
        child: MergedNode | None = node.get(key) if isinstance(node, MergedTable) else None
        if child is None:
            raise PathNotFoundError(resolved.text)
        node = child
    return node


def lookup(root: MergedTable, resolved: ResolvedPath) -> MergedNode | Any:
    """Return the node a resolved path designates, or the element for index paths.

    Args:
        root (MergedTable): A validated, fully defaulted tree.
        resolved (ResolvedPath): The path.

    Returns:
        MergedNode | Any: The node; for element paths the (frozen) element value.

    Raises:
        PathNotFoundError: If the index is out of range.
    """
    node: MergedNode = lookup_node(root, resolved)
    if resolved.index is None:
        return node
    if not isinstance(node, MergedLeaf):
        raise PathNotFoundError(resolved.text)
    items: tuple[Any, ...] = tuple(node.value)
    if resolved.index >= len(items):
        raise PathNotFoundError(resolved.text, f"index out of range (length {len(items)})")
    return items[resolved.index]
