# topmark:header:start
#
#   project      : ShellConf
#   file         : types.py
#   file_relpath : src/shellconf/io/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared TOML-related types for the I/O package."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

TomlTable = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One parsed configuration document.

    Attributes:
        path (Path): Canonical (resolved) path of the document; this is its identity.
        table (TomlTable): Parsed body as plain Python data, without the ``imports``
            directive. Treat as read-only once constructed.
        imports (tuple[str, ...]): Declared import entries, in declaration order, exactly
            as written (``@``-prefixed or relative).
    """

    path: Path
    table: TomlTable
    imports: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """Short display name (file name) of the document."""
        return self.path.name
