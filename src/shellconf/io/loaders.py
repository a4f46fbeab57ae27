# topmark:header:start
#
#   project      : ShellConf
#   file         : loaders.py
#   file_relpath : src/shellconf/io/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration documents.

This module provides I/O helpers for reading one configuration document into a
[`ConfigSource`][shellconf.io.types.ConfigSource]:

- the document body is parsed with `tomlkit` and returned as plain `dict` structures,
- the top-level ``imports`` directive is split off into ``ConfigSource.imports``.

Import graph traversal lives in [`shellconf.resolver`][shellconf.resolver]; this module
only ever looks at one file at a time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from shellconf.constants import ROOT_CONFIG_BANNER
from shellconf.core.errors import ParseError, SourceReadError
from shellconf.core.keys import Toml
from shellconf.core.logging import get_logger

from .guards import is_array, is_toml_table
from .types import ConfigSource

if TYPE_CHECKING:
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger

    from .types import TomlTable

logger: ShellconfLogger = get_logger(__name__)


def read_document_text(path: Path) -> str:
    """Read a configuration document as UTF-8 text.

    Args:
        path (Path): Path of the document.

    Returns:
        str: The document text.

    Raises:
        SourceReadError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise SourceReadError(path, f"not valid UTF-8: {exc}") from exc


def parse_toml_text(text: str, *, path: Path) -> TomlTable:
    """Parse TOML text into plain Python data.

    Args:
        text (str): TOML document text.
        path (Path): Path used for error reporting.

    Returns:
        TomlTable: The unwrapped document.

    Raises:
        ParseError: If the text is not valid TOML.
    """
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except TomlkitParseError as exc:
        raise ParseError(path, (exc.line, exc.col), str(exc)) from exc
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if is_toml_table(data_any) else {}


def _split_imports(table: TomlTable, *, path: Path) -> tuple[str, ...]:
    """Remove and return the ``imports`` directive of a parsed document.

    Non-string and empty entries are dropped with a warning.
    """
    if Toml.KEY_IMPORTS not in table:
        return ()
    raw: object = table.pop(Toml.KEY_IMPORTS)
    if not is_array(raw):
        raise ParseError(
            path,
            None,
            f"'{Toml.KEY_IMPORTS}' must be an array of strings, found {type(raw).__name__}",
        )

    entries: list[str] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, str) or not item.strip():
            logger.warning(
                "%s: ignoring %s[%d]: expected a non-empty string, got %r",
                path,
                Toml.KEY_IMPORTS,
                idx,
                item,
            )
            continue
        entries.append(item.strip())
    return tuple(entries)


def load_document(path: Path, *, text: str | None = None) -> ConfigSource:
    """Load one configuration document.

    Args:
        path (Path): Canonical path of the document.
        text (str | None): Document text to use instead of reading ``path`` (used to
            preflight an edit before it is written).

    Returns:
        ConfigSource: The parsed document.

    Raises:
        ParseError: If the document is not valid TOML or ``imports`` is malformed.
        SourceReadError: If the document cannot be read.
    """
    if text is None:
        text = read_document_text(path)
    table: TomlTable = parse_toml_text(text, path=path)
    imports: tuple[str, ...] = _split_imports(table, path=path)
    logger.debug("Loaded %s (%d keys, %d imports)", path, len(table), len(imports))
    return ConfigSource(path=path, table=table, imports=imports)


def ensure_root_config(path: Path) -> bool:
    """Create an empty root configuration document if none exists.

    Args:
        path (Path): Path of the root configuration document.

    Returns:
        bool: ``True`` if the file was created.

    Raises:
        SourceReadError: If the directory or file cannot be created.
    """
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ROOT_CONFIG_BANNER, encoding="utf-8")
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc
    logger.info("Created empty configuration file %s", path)
    return True
