# topmark:header:start
#
#   project      : ShellConf
#   file         : validator.py
#   file_relpath : src/shellconf/schema/validator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Strict schema validation of merged trees.

[`validate`][shellconf.schema.validator.validate] walks the schema and the merged tree
side by side and produces a new, fully defaulted tree whose nodes reference their schema
node:

- a leaf the merged tree does not supply gets the schema default (provenance ``None``);
- a supplied leaf must match the node kind and satisfy its constraints (``nan`` is
  never a valid number, and infinities fail any declared bound);
- any supplied key without a schema node is an
  [`UnknownKeyError`][shellconf.core.errors.UnknownKeyError].

Errors are collected rather than short-circuited, so one
[`ConfigValidationError`][shellconf.core.errors.ConfigValidationError] lists every
problem of the pass.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from shellconf.core.errors import (
    ConfigValidationError,
    ConstraintViolationError,
    TypeMismatchError,
    UnknownKeyError,
)
from shellconf.core.logging import get_logger
from shellconf.io.guards import is_array, is_number
from shellconf.merge import MergedLeaf, MergedTable

from .model import SchemaKind

if TYPE_CHECKING:
    from shellconf.core.errors import ValidationError
    from shellconf.core.logging import ShellconfLogger
    from shellconf.merge import MergedNode

    from .model import SchemaNode

logger: ShellconfLogger = get_logger(__name__)


def join_path(prefix: str, key: str) -> str:
    """Join a dotted path prefix and a key."""
    return f"{prefix}.{key}" if prefix else key


def kind_name(value: Any) -> str:
    """Return the schema-kind style name of a runtime value, for error messages."""
    if isinstance(value, bool):
        return "bool"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_array(value):
        return "array"
    if isinstance(value, (Mapping, MergedTable)):
        return "table"
    if isinstance(value, (datetime, date, time)):
        return "datetime"
    return type(value).__name__


def _matches_kind(kind: SchemaKind, value: Any) -> bool:
    if kind is SchemaKind.STRING:
        return isinstance(value, str)
    if kind is SchemaKind.NUMBER:
        return is_number(value)
    if kind is SchemaKind.BOOL:
        return isinstance(value, bool)
    if kind is SchemaKind.ARRAY:
        return is_array(value)
    if kind is SchemaKind.ENUM:
        return isinstance(value, str)
    return isinstance(value, Mapping)


def validate_value(node: SchemaNode, value: Any, path: str) -> list[ValidationError]:
    """Check one value against a leaf schema node.

    Args:
        node (SchemaNode): The schema node (any leaf kind).
        value (Any): The candidate value.
        path (str): Dotted path used in error reports.

    Returns:
        list[ValidationError]: Every violation found (empty when valid).
    """
    if not _matches_kind(node.kind, value):
        return [TypeMismatchError(path, node.kind.value, kind_name(value))]

    errors: list[ValidationError] = []
    c = node.constraints
    if node.kind is SchemaKind.NUMBER:
        bounded: bool = c.minimum is not None or c.maximum is not None
        if math.isnan(value) or (bounded and not math.isfinite(value)):
            errors.append(ConstraintViolationError(path, "finite number", value))
        else:
            if c.minimum is not None and value < c.minimum:
                errors.append(ConstraintViolationError(path, f"minimum {c.minimum:g}", value))
            if c.maximum is not None and value > c.maximum:
                errors.append(ConstraintViolationError(path, f"maximum {c.maximum:g}", value))
    elif node.kind is SchemaKind.STRING:
        if c.pattern is not None and re.fullmatch(c.pattern, value) is None:
            errors.append(ConstraintViolationError(path, f"pattern {c.pattern!r}", value))
    elif node.kind is SchemaKind.ENUM:
        if c.choices is not None and value not in c.choices:
            errors.append(
                ConstraintViolationError(path, "one of " + ", ".join(c.choices), value),
            )
    elif node.kind is SchemaKind.ARRAY and node.items is not None:
        for idx, item in enumerate(value):
            if not _matches_kind(node.items, item):
                errors.append(
                    TypeMismatchError(f"{path}[{idx}]", node.items.value, kind_name(item)),
                )
    return errors


def _report_unknown(node: MergedNode, path: str, errors: list[ValidationError]) -> None:
    # Unknown tables are reported per leaf so the message names the full key.
    if isinstance(node, MergedTable) and node.children:
        for key, child in node.children.items():
            _report_unknown(child, join_path(path, key), errors)
    else:
        errors.append(UnknownKeyError(path))


def _validate_table(
    table: MergedTable | None,
    schema: SchemaNode,
    path: str,
    errors: list[ValidationError],
) -> MergedTable:
    supplied: Mapping[str, MergedNode] = table.children if table is not None else {}
    children: dict[str, MergedNode] = {}

    for key, child_schema in schema.children.items():
        child_path: str = join_path(path, key)
        merged_child: MergedNode | None = supplied.get(key)

        if child_schema.kind is SchemaKind.TABLE:
            if merged_child is None or isinstance(merged_child, MergedTable):
                children[key] = _validate_table(merged_child, child_schema, child_path, errors)
            else:
                errors.append(
                    TypeMismatchError(child_path, "table", kind_name(merged_child.value)),
                )
            continue

        if merged_child is None:
            children[key] = MergedLeaf(
                value=child_schema.default,
                provenance=None,
                schema=child_schema,
            )
        elif isinstance(merged_child, MergedTable):
            errors.append(TypeMismatchError(child_path, child_schema.kind.value, "table"))
        else:
            errors.extend(validate_value(child_schema, merged_child.value, child_path))
            children[key] = MergedLeaf(
                value=merged_child.value,
                provenance=merged_child.provenance,
                schema=child_schema,
            )

    for key, merged_child in supplied.items():
        if key not in schema.children:
            _report_unknown(merged_child, join_path(path, key), errors)

    return MergedTable(children=MappingProxyType(children), schema=schema)


def validate(merged: MergedTable, schema: SchemaNode) -> MergedTable:
    """Validate and default a merged tree.

    Args:
        merged (MergedTable): Output of [`merge`][shellconf.merge.merge].
        schema (SchemaNode): Root schema node (a table).

    Returns:
        MergedTable: A fully defaulted tree whose nodes reference their schema nodes.

    Raises:
        ConfigValidationError: If any violation was found; carries all of them.
    """
    errors: list[ValidationError] = []
    tree: MergedTable = _validate_table(merged, schema, "", errors)
    if errors:
        logger.debug("Validation failed with %d error(s)", len(errors))
        raise ConfigValidationError(errors)
    return tree
