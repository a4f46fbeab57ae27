# topmark:header:start
#
#   project      : ShellConf
#   file         : render.py
#   file_relpath : src/shellconf/io/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render configuration data as TOML.

This module contains helpers for serializing a `TomlTable` (or a frozen snapshot
subtree) to a TOML string and for rendering single values as TOML literals.

TOML has no `null` value, so `None` entries are stripped during rendering.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit

from shellconf.core.logging import get_logger

if TYPE_CHECKING:
    from shellconf.core.logging import ShellconfLogger

    from .types import TomlTable

logger: ShellconfLogger = get_logger(__name__)


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` from mappings and arrays.

    Tuples (frozen arrays) are rendered as lists and mapping keys are normalized to
    strings, since TOML tables are string-keyed.
    """
    if isinstance(value, Mapping):
        out: dict[str, object] = {}
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        for k_any, v_any in m.items():
            if v_any is None:
                logger.debug("Ignoring `None` entry in Mapping for key %s", k_any)
                continue
            k: str = k_any if isinstance(k_any, str) else str(k_any)
            out[k] = _strip_none_for_toml(v_any)
        return out

    if isinstance(value, (list, tuple)):
        seq: list[object] = list(cast("list[object] | tuple[object, ...]", value))
        return [_strip_none_for_toml(v) for v in seq if v is not None]

    return value


def to_toml(toml_dict: TomlTable | Mapping[str, Any]) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict (TomlTable | Mapping[str, Any]): TOML mapping to render.

    Returns:
        str: The rendered TOML document as a string.
    """
    cleaned: Any = _strip_none_for_toml(toml_dict)
    return cast("str", cast("Any", tomlkit).dumps(cast("Mapping[str, Any]", cleaned)))


def to_toml_literal(value: object) -> str:
    """Render a single value as an inline TOML literal (``"top"``, ``1.5``, ``[1, 2]``).

    Args:
        value (object): A scalar, array or table value.

    Returns:
        str: The TOML literal text.
    """
    cleaned: Any = _strip_none_for_toml(value)
    if isinstance(cleaned, dict):
        table = tomlkit.inline_table()
        table.update(cast("dict[str, Any]", cleaned))
        return table.as_string()
    return tomlkit.item(cleaned).as_string()
