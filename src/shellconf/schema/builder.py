# topmark:header:start
#
#   project      : ShellConf
#   file         : builder.py
#   file_relpath : src/shellconf/schema/builder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build the schema tree from a static, declarative description.

The description is a flat list of entries, one per dotted path. In TOML:

```toml
[[field]]
path = "bar.location"
kind = "enum"
default = "top"
choices = ["top", "bottom", "left", "right"]
description = "Screen edge the bar is anchored to."
```

Rules:
    - ``path`` and ``kind`` are required; intermediate tables are created implicitly and
      may be declared explicitly (``kind = "table"``) to attach a description.
    - Every leaf needs a ``default``, and the default must satisfy the entry's own
      constraints.
    - Constraint keys must fit the kind: ``minimum``/``maximum`` for numbers,
      ``choices`` (required) for enums, ``pattern`` for strings, ``items`` for arrays.

The packaged desktop-shell schema (``shell-schema.toml``) is loaded with
[`load_default_schema`][shellconf.schema.builder.load_default_schema].
"""

from __future__ import annotations

import json
import re
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, cast

from shellconf.constants import DEFAULT_SCHEMA_NAME, DEFAULT_SCHEMA_PACKAGE, IDENT_PATTERN
from shellconf.core.errors import SchemaDefinitionError, ShellconfError
from shellconf.core.keys import SchemaKey
from shellconf.core.logging import get_logger
from shellconf.io.guards import is_array, is_mapping, is_number
from shellconf.io.loaders import parse_toml_text, read_document_text
from shellconf.merge import freeze_value

from .model import ITEM_KINDS, Constraints, SchemaKind, SchemaNode
from .validator import validate_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from shellconf.core.logging import ShellconfLogger

logger: ShellconfLogger = get_logger(__name__)

_PATH_RE: re.Pattern[str] = re.compile(rf"{IDENT_PATTERN}(\.{IDENT_PATTERN})*")

_KNOWN_KEYS: frozenset[str] = frozenset(
    {
        SchemaKey.PATH,
        SchemaKey.KIND,
        SchemaKey.DEFAULT,
        SchemaKey.DESCRIPTION,
        SchemaKey.MINIMUM,
        SchemaKey.MAXIMUM,
        SchemaKey.CHOICES,
        SchemaKey.PATTERN,
        SchemaKey.ITEMS,
    },
)

# Constraint keys and the kinds that accept them.
_CONSTRAINT_KINDS: dict[str, SchemaKind] = {
    SchemaKey.MINIMUM: SchemaKind.NUMBER,
    SchemaKey.MAXIMUM: SchemaKind.NUMBER,
    SchemaKey.CHOICES: SchemaKind.ENUM,
    SchemaKey.PATTERN: SchemaKind.STRING,
    SchemaKey.ITEMS: SchemaKind.ARRAY,
}


class _Draft:
    """Mutable node used while the flat entry list is assembled into a tree."""

    def __init__(self, path: str, kind: SchemaKind, *, explicit: bool) -> None:
        self.path = path
        self.kind = kind
        self.explicit = explicit
        self.entry: Mapping[str, Any] = {}
        self.children: dict[str, _Draft] = {}


def _parse_kind(path: str, raw: object) -> SchemaKind:
    kind: SchemaKind | None = SchemaKind.parse(raw) if isinstance(raw, str) else None
    if kind is None:
        allowed: str = ", ".join(k.value for k in SchemaKind)
        raise SchemaDefinitionError(path, f"unknown kind {raw!r} (expected one of {allowed})")
    return kind


def _build_constraints(path: str, kind: SchemaKind, entry: Mapping[str, Any]) -> Constraints:
    for key, wanted in _CONSTRAINT_KINDS.items():
        if key in entry and kind is not wanted:
            raise SchemaDefinitionError(path, f"'{key}' is not allowed for kind {kind.value}")

    minimum: object = entry.get(SchemaKey.MINIMUM)
    maximum: object = entry.get(SchemaKey.MAXIMUM)
    for key, bound in ((SchemaKey.MINIMUM, minimum), (SchemaKey.MAXIMUM, maximum)):
        if bound is not None and not is_number(bound):
            raise SchemaDefinitionError(path, f"'{key}' must be a number")
    if is_number(minimum) and is_number(maximum) and minimum > maximum:
        raise SchemaDefinitionError(path, "'minimum' is greater than 'maximum'")

    choices: tuple[str, ...] | None = None
    if kind is SchemaKind.ENUM:
        raw_choices: object = entry.get(SchemaKey.CHOICES)
        if (
            not is_array(raw_choices)
            or not raw_choices
            or not all(isinstance(c, str) for c in raw_choices)
        ):
            raise SchemaDefinitionError(path, "enum needs a non-empty 'choices' string array")
        choices = tuple(cast("list[str]", raw_choices))

    pattern: object = entry.get(SchemaKey.PATTERN)
    if pattern is not None:
        if not isinstance(pattern, str):
            raise SchemaDefinitionError(path, "'pattern' must be a string")
        try:
            re.compile(pattern)
        except re.error as exc:
            raise SchemaDefinitionError(path, f"invalid 'pattern': {exc}") from exc

    return Constraints(
        minimum=cast("float | None", minimum),
        maximum=cast("float | None", maximum),
        choices=choices,
        pattern=pattern,
    )


def _parse_items(path: str, entry: Mapping[str, Any]) -> SchemaKind | None:
    raw: object = entry.get(SchemaKey.ITEMS)
    if raw is None:
        return None
    items: SchemaKind = _parse_kind(path, raw)
    if items not in ITEM_KINDS:
        allowed: str = ", ".join(sorted(k.value for k in ITEM_KINDS))
        raise SchemaDefinitionError(path, f"'items' must be one of {allowed}")
    return items


def _insert(root: _Draft, entry: Mapping[str, Any]) -> None:
    raw_path: object = entry.get(SchemaKey.PATH)
    if not isinstance(raw_path, str) or _PATH_RE.fullmatch(raw_path) is None:
        raise SchemaDefinitionError(str(raw_path), "'path' must be a dotted identifier path")
    path: str = raw_path

    unknown: list[str] = sorted(set(entry) - _KNOWN_KEYS)
    if unknown:
        raise SchemaDefinitionError(path, f"unknown entry key(s): {', '.join(unknown)}")

    kind: SchemaKind = _parse_kind(path, entry.get(SchemaKey.KIND))
    keys: list[str] = path.split(".")

    parent: _Draft = root
    for depth, key in enumerate(keys[:-1], start=1):
        node: _Draft | None = parent.children.get(key)
        if node is None:
            node = _Draft(".".join(keys[:depth]), SchemaKind.TABLE, explicit=False)
            parent.children[key] = node
        elif node.kind is not SchemaKind.TABLE:
            raise SchemaDefinitionError(path, f"'{node.path}' is a {node.kind.value}, not a table")
        parent = node

    existing: _Draft | None = parent.children.get(keys[-1])
    if existing is not None:
        if existing.explicit or kind is not SchemaKind.TABLE:
            raise SchemaDefinitionError(path, "declared more than once")
        existing.explicit = True
        existing.entry = entry
        return

    leaf = _Draft(path, kind, explicit=True)
    leaf.entry = entry
    parent.children[keys[-1]] = leaf


def _freeze(draft: _Draft) -> SchemaNode:
    entry: Mapping[str, Any] = draft.entry
    description: object = entry.get(SchemaKey.DESCRIPTION, "")
    if not isinstance(description, str):
        raise SchemaDefinitionError(draft.path, "'description' must be a string")

    if draft.kind is SchemaKind.TABLE:
        if SchemaKey.DEFAULT in entry:
            raise SchemaDefinitionError(draft.path, "tables take their defaults from children")
        _build_constraints(draft.path, draft.kind, entry)
        return SchemaNode(
            kind=SchemaKind.TABLE,
            path=draft.path,
            description=description,
            children=MappingProxyType({k: _freeze(c) for k, c in draft.children.items()}),
        )

    if entry.get(SchemaKey.DEFAULT) is None:
        raise SchemaDefinitionError(draft.path, "leaf entries need a 'default'")

    node = SchemaNode(
        kind=draft.kind,
        path=draft.path,
        default=freeze_value(entry[SchemaKey.DEFAULT]),
        description=description,
        constraints=_build_constraints(draft.path, draft.kind, entry),
        items=_parse_items(draft.path, entry),
    )
    problems = validate_value(node, node.default, draft.path)
    if problems:
        raise SchemaDefinitionError(draft.path, f"invalid default: {problems[0]}")
    return node


def build_schema(entries: Iterable[Mapping[str, Any]]) -> SchemaNode:
    """Build the schema tree from a flat list of entries.

    Args:
        entries (Iterable[Mapping[str, Any]]): Entry tables (see module docstring).

    Returns:
        SchemaNode: The root node (a table with path ``""``).

    Raises:
        SchemaDefinitionError: If an entry is malformed.
    """
    root = _Draft("", SchemaKind.TABLE, explicit=True)
    count: int = 0
    for entry in entries:
        if not is_mapping(entry):
            raise SchemaDefinitionError("", f"entry #{count + 1} is not a table")
        _insert(root, entry)
        count += 1
    schema: SchemaNode = _freeze(root)
    logger.debug("Built schema from %d entries (%d nodes)", count, len(schema.walk()))
    return schema


def _entries_from_document(data: Mapping[str, Any], origin: str) -> list[Mapping[str, Any]]:
    raw: object = data.get(SchemaKey.SECTION_FIELD)
    if not is_array(raw):
        raise SchemaDefinitionError(
            "",
            f"{origin}: expected an array of '{SchemaKey.SECTION_FIELD}' tables",
        )
    return list(cast("list[Mapping[str, Any]]", raw))


def parse_schema_text(text: str, *, origin: str, fmt: str = "toml") -> SchemaNode:
    """Parse a schema description document (``toml`` or ``json``) into a schema tree.

    Args:
        text (str): Document text.
        origin (str): Name used in error messages (file name or resource).
        fmt (str): ``"toml"`` or ``"json"``.

    Returns:
        SchemaNode: The root node.

    Raises:
        SchemaDefinitionError: If the document or one of its entries is malformed.
    """
    data: Any
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SchemaDefinitionError("", f"{origin}: {exc}") from exc
    else:
        try:
            data = parse_toml_text(text, path=Path(origin))
        except ShellconfError as exc:
            raise SchemaDefinitionError("", str(exc)) from exc
    if not is_mapping(data):
        raise SchemaDefinitionError("", f"{origin}: expected a table at the top level")
    return build_schema(_entries_from_document(data, origin))


def load_schema(path: Path) -> SchemaNode:
    """Load a schema description file (``.json`` or TOML).

    Args:
        path (Path): The schema description file.

    Returns:
        SchemaNode: The root node.

    Raises:
        SchemaDefinitionError: If the file is malformed.
        SourceReadError: If the file cannot be read.
    """
    text: str = read_document_text(path)
    fmt: str = "json" if path.suffix.lower() == ".json" else "toml"
    logger.info("Loading schema from %s", path)
    return parse_schema_text(text, origin=str(path), fmt=fmt)


def load_default_schema() -> SchemaNode:
    """Load the packaged desktop-shell schema."""
    resource = files(DEFAULT_SCHEMA_PACKAGE).joinpath(DEFAULT_SCHEMA_NAME)
    text: str = resource.read_text(encoding="utf-8")
    return parse_schema_text(text, origin=DEFAULT_SCHEMA_NAME)
