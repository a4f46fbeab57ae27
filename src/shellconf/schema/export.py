# topmark:header:start
#
#   project      : ShellConf
#   file         : export.py
#   file_relpath : src/shellconf/schema/export.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Export the schema tree for editors and tooling.

Two renderings are supported:

- **JSON Schema** (draft 2020-12): lets TOML-aware editors complete and check the
  configuration. Tables become ``object`` schemas with ``additionalProperties: false``
  so unknown keys are flagged the same way the validator flags them. The document ``$id``
  is ``shellconf-config-<version>``.
- **TOML**: the flat ``[[field]]`` entry list accepted by
  [`shellconf.schema.builder`][shellconf.schema.builder], so an exported schema can be
  edited and loaded back with ``--schema``.

This module is I/O-free: it returns strings for the CLI layer to print or write.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from shellconf.constants import SHELLCONF_VERSION
from shellconf.core.formats import OutputFormat
from shellconf.core.keys import SchemaKey
from shellconf.io.render import to_toml
from shellconf.merge import thaw

from .model import SchemaKind

if TYPE_CHECKING:
    from .model import SchemaNode

JSON_SCHEMA_DIALECT: str = "https://json-schema.org/draft/2020-12/schema"

_JSON_TYPES: dict[SchemaKind, str] = {
    SchemaKind.STRING: "string",
    SchemaKind.NUMBER: "number",
    SchemaKind.BOOL: "boolean",
    SchemaKind.ARRAY: "array",
    SchemaKind.TABLE: "object",
    SchemaKind.ENUM: "string",
}


def _node_to_json_schema(node: SchemaNode) -> dict[str, Any]:
    out: dict[str, Any] = {"type": _JSON_TYPES[node.kind]}
    if node.description:
        out["description"] = node.description

    if node.kind is SchemaKind.TABLE:
        out["properties"] = {k: _node_to_json_schema(c) for k, c in node.children.items()}
        out["additionalProperties"] = False
        return out

    c = node.constraints
    if c.minimum is not None:
        out["minimum"] = c.minimum
    if c.maximum is not None:
        out["maximum"] = c.maximum
    if c.pattern is not None:
        # JSON Schema patterns are not anchored; the validator uses a full match.
        out["pattern"] = f"^(?:{c.pattern})$"
    if c.choices is not None:
        out["enum"] = list(c.choices)
    if node.items is not None:
        out["items"] = {"type": _JSON_TYPES[node.items]}
    out["default"] = thaw(node.default)
    return out


def to_json_schema(schema: SchemaNode) -> dict[str, Any]:
    """Build a JSON Schema document describing the configuration.

    Args:
        schema (SchemaNode): The root schema node.

    Returns:
        dict[str, Any]: The JSON Schema document.
    """
    doc: dict[str, Any] = {
        "$schema": JSON_SCHEMA_DIALECT,
        "$id": f"shellconf-config-{SHELLCONF_VERSION}",
        "title": "ShellConf configuration",
    }
    doc.update(_node_to_json_schema(schema))
    return doc


def to_field_entries(schema: SchemaNode) -> list[dict[str, Any]]:
    """Flatten the schema tree back into ``[[field]]`` entries (pre-order).

    Implicit tables without a description are omitted; they are recreated from their
    children's paths on load.
    """
    entries: list[dict[str, Any]] = []
    for node in schema.walk():
        if not node.path:
            continue
        if node.kind is SchemaKind.TABLE and not node.description:
            continue
        entry: dict[str, Any] = {SchemaKey.PATH: node.path, SchemaKey.KIND: node.kind.value}
        if node.kind is not SchemaKind.TABLE:
            entry[SchemaKey.DEFAULT] = thaw(node.default)
        c = node.constraints
        if c.minimum is not None:
            entry[SchemaKey.MINIMUM] = c.minimum
        if c.maximum is not None:
            entry[SchemaKey.MAXIMUM] = c.maximum
        if c.choices is not None:
            entry[SchemaKey.CHOICES] = list(c.choices)
        if c.pattern is not None:
            entry[SchemaKey.PATTERN] = c.pattern
        if node.items is not None:
            entry[SchemaKey.ITEMS] = node.items.value
        if node.description:
            entry[SchemaKey.DESCRIPTION] = node.description
        entries.append(entry)
    return entries


def render_schema(schema: SchemaNode, fmt: OutputFormat = OutputFormat.JSON) -> str:
    """Render the schema in the requested format.

    Args:
        schema (SchemaNode): The root schema node.
        fmt (OutputFormat): ``JSON`` for JSON Schema, ``TOML`` for the entry list.

    Returns:
        str: The rendered document.
    """
    if fmt is OutputFormat.TOML:
        return to_toml({SchemaKey.SECTION_FIELD: to_field_entries(schema)})
    return json.dumps(to_json_schema(schema), indent=2)
