# topmark:header:start
#
#   project      : ShellConf
#   file         : surgery.py
#   file_relpath : src/shellconf/io/surgery.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lossless TOML edits using tomlkit.

This module provides helpers that operate on a TOML *AST* (via tomlkit) so that a
``set``/``reset`` rewrites exactly one key of a document while comments, ordering,
whitespace and every other key are preserved.

Use cases:
- Setting a key at a nested table path, creating intermediate tables when needed.
- Removing a key at a nested table path.
- Atomically replacing a document on disk with its edited text.

Notes:
- Key paths are sequences of table keys; array indices never appear here. Callers that
  edit one array element rewrite the whole array (arrays are leaves).
- Navigation goes through regular tables, inline tables, dotted-key tables and
  out-of-order table proxies alike.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.container import OutOfOrderTableProxy
from tomlkit.exceptions import ParseError as TomlkitParseError
from tomlkit.items import InlineTable, Table

from shellconf.core.errors import WriteBackError
from shellconf.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shellconf.core.logging import ShellconfLogger

logger: ShellconfLogger = get_logger(__name__)

# Anything we can index into with a string key and assign to.
_TableLike = tomlkit.TOMLDocument | Table | InlineTable | OutOfOrderTableProxy


def _is_table_like(obj: object) -> bool:
    return isinstance(obj, (tomlkit.TOMLDocument, Table, InlineTable, OutOfOrderTableProxy))


def _parse(toml_text: str) -> tomlkit.TOMLDocument:
    try:
        return tomlkit.parse(toml_text)
    except TomlkitParseError as exc:
        raise RuntimeError(f"Error parsing TOML document: {exc}") from exc


def _descend(
    doc: tomlkit.TOMLDocument,
    keys: Sequence[str],
    *,
    create: bool,
) -> _TableLike | None:
    """Walk ``keys`` from the document root and return the innermost table.

    Args:
        doc (tomlkit.TOMLDocument): Parsed document.
        keys (Sequence[str]): Table keys to walk.
        create (bool): Create missing tables instead of returning ``None``.

    Returns:
        _TableLike | None: The table at ``keys``; ``None`` if missing and ``create`` is False.

    Raises:
        TypeError: If a key along the path holds a non-table value.
    """
    current: _TableLike = doc
    walked: list[str] = []
    for key in keys:
        walked.append(key)
        container: Any = current
        if key in container:
            nxt: object = container[key]
            if not _is_table_like(nxt):
                raise TypeError(f"'{'.'.join(walked)}' exists but is not a TOML table")
            current = cast("_TableLike", nxt)
            continue
        if not create:
            return None
        # Inline tables can only hold inline tables.
        new_tbl: Table | InlineTable = (
            tomlkit.inline_table() if isinstance(current, InlineTable) else tomlkit.table()
        )
        container[key] = new_tbl
        current = cast("_TableLike", container[key])
    return current


def set_key(toml_text: str, keys: Sequence[str], value: object) -> str:
    """Set the key at ``keys`` to ``value``, leaving the rest of the document untouched.

    Args:
        toml_text (str): TOML document text.
        keys (Sequence[str]): Non-empty key path (``["bar", "scale"]``).
        value (object): Plain Python value (scalars, lists, dicts).

    Returns:
        str: Updated TOML document text.

    Raises:
        ValueError: If ``keys`` is empty.
        RuntimeError: If the TOML document cannot be parsed.
        TypeError: If an intermediate key exists but is not a table.
    """
    if not keys:
        raise ValueError("key path must contain at least one key")
    doc: tomlkit.TOMLDocument = _parse(toml_text)
    parent = _descend(doc, keys[:-1], create=True)
    container: Any = parent
    container[keys[-1]] = value
    logger.trace("set_key %s = %r", ".".join(keys), value)
    return doc.as_string()


def remove_key(toml_text: str, keys: Sequence[str]) -> tuple[str, bool]:
    """Remove the key at ``keys`` if present.

    Args:
        toml_text (str): TOML document text.
        keys (Sequence[str]): Non-empty key path.

    Returns:
        tuple[str, bool]: The (possibly unchanged) document text and whether a key was
        removed.

    Raises:
        ValueError: If ``keys`` is empty.
        RuntimeError: If the TOML document cannot be parsed.
        TypeError: If an intermediate key exists but is not a table.
    """
    if not keys:
        raise ValueError("key path must contain at least one key")
    doc: tomlkit.TOMLDocument = _parse(toml_text)
    parent = _descend(doc, keys[:-1], create=False)
    container: Any = parent
    if parent is None or keys[-1] not in container:
        return toml_text, False
    del container[keys[-1]]
    logger.trace("remove_key %s", ".".join(keys))
    return doc.as_string(), True


def write_text_atomic(path: Path, text: str) -> int:
    """Replace ``path`` with ``text`` atomically (temp file in the same directory + rename).

    The file mode of an existing document is preserved.

    Args:
        path (Path): Destination document.
        text (str): New document text.

    Returns:
        int: Number of UTF-8 bytes written.

    Raises:
        WriteBackError: If the document cannot be written.
    """
    data: bytes = text.encode("utf-8")
    tmp_name: str | None = None
    try:
        mode: int | None = path.stat().st_mode if path.exists() else None
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise WriteBackError(path, exc.strerror or str(exc)) from exc
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return len(data)
