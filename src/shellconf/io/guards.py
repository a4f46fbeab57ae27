# topmark:header:start
#
#   project      : ShellConf
#   file         : guards.py
#   file_relpath : src/shellconf/io/guards.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type guards for values coming out of TOML parsing.

These `TypeGuard`-based predicates help Pyright narrow runtime values produced by
``tomlkit`` (after ``unwrap()``) and the frozen values stored in snapshots.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeGuard

from .types import TomlTable


def is_toml_table(obj: object) -> TypeGuard[TomlTable]:
    """Type guard for a TOML table-like dict.

    Args:
        obj (object): Value to test.

    Returns:
        TypeGuard[TomlTable]: ``True`` if ``obj`` is a ``dict[str, Any]``.
    """
    return isinstance(obj, dict)


def is_mapping(obj: object) -> TypeGuard[Mapping[str, Any]]:
    """Type guard for any mapping (plain dicts and frozen snapshot tables).

    Args:
        obj (object): Value to test.

    Returns:
        TypeGuard[Mapping[str, Any]]: True if obj is a Mapping.
    """
    return isinstance(obj, Mapping)


def is_array(obj: object) -> TypeGuard[Sequence[Any]]:
    """Type guard for TOML arrays (lists, or tuples once frozen).

    Strings are sequences too, but never arrays.

    Args:
        obj (object): Value to test.

    Returns:
        TypeGuard[Sequence[Any]]: True if obj is a list or tuple.
    """
    return isinstance(obj, (list, tuple))


def is_number(obj: object) -> TypeGuard[int | float]:
    """Type guard for TOML numbers; ``bool`` is excluded even though it subclasses ``int``.

    Args:
        obj (object): Value to test.

    Returns:
        TypeGuard[int | float]: True if obj is an int or float but not a bool.
    """
    return isinstance(obj, (int, float)) and not isinstance(obj, bool)
