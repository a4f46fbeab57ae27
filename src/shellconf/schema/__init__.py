# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/schema/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Schema model, builder, validator and exporters.

Submodules:
    - [`model`][shellconf.schema.model]: `SchemaNode`, `SchemaKind`, `Constraints`.
    - [`builder`][shellconf.schema.builder]: build the tree from ``[[field]]`` entries.
    - [`validator`][shellconf.schema.validator]: validate and default merged trees.
    - [`export`][shellconf.schema.export]: JSON Schema and TOML renderings.
"""

from __future__ import annotations

from shellconf.schema.builder import (
    build_schema,
    load_default_schema,
    load_schema,
    parse_schema_text,
)
from shellconf.schema.export import render_schema, to_field_entries, to_json_schema
from shellconf.schema.model import Constraints, SchemaKind, SchemaNode
from shellconf.schema.validator import validate, validate_value

__all__ = [
    "Constraints",
    "SchemaKind",
    "SchemaNode",
    "build_schema",
    "load_default_schema",
    "load_schema",
    "parse_schema_text",
    "render_schema",
    "to_field_entries",
    "to_json_schema",
    "validate",
    "validate_value",
]
