# topmark:header:start
#
#   project      : ShellConf
#   file         : paths.py
#   file_relpath : src/shellconf/io/paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pure helpers for configuration directory discovery and import path normalization.

These utilities centralize the path resolution rules used by document loading. They do
**no I/O** beyond ``Path.resolve()`` and reading environment variables.

Key behaviors:
    - ``default_config_dir()``: ``$SHELLCONF_CONFIG_DIR``, else
      ``$XDG_CONFIG_HOME/shellconf``, else ``~/.config/shellconf``.
    - ``resolve_import(entry, importer, config_dir)``: ``@``-prefixed entries are anchored
      at the configuration directory; other entries at the importing file's directory.
      Entries without a suffix get ``.toml`` appended; entries that name no file are a
      [`ParseError`][shellconf.core.errors.ParseError] of the importing document.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from shellconf.constants import APP_DIR_NAME, CONFIG_DIR_ENV, ROOT_CONFIG_NAME
from shellconf.core.errors import ParseError
from shellconf.core.keys import Toml
from shellconf.core.logging import get_logger

if TYPE_CHECKING:
    from os import PathLike

    from shellconf.core.logging import ShellconfLogger

logger: ShellconfLogger = get_logger(__name__)


def abs_path_from(base: Path, raw: str | PathLike[str]) -> Path:
    """Return an absolute Path for *raw* using *base* if *raw* is relative."""
    p = Path(os.path.expanduser(str(raw)))
    return (base / p).resolve() if not p.is_absolute() else p.resolve()


def default_config_dir() -> Path:
    """Return the configuration directory according to the environment."""
    explicit: str | None = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        return Path(explicit).expanduser().resolve()
    xdg: str | None = os.environ.get("XDG_CONFIG_HOME")
    base: Path = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return (base / APP_DIR_NAME).resolve()


def default_root_config(config_dir: Path | None = None) -> Path:
    """Return the root configuration file inside ``config_dir`` (or the default directory)."""
    return (config_dir or default_config_dir()) / ROOT_CONFIG_NAME


def resolve_import(entry: str, importer: Path, config_dir: Path) -> Path:
    """Resolve one ``imports`` entry to an absolute, normalized path.

    Args:
        entry (str): The entry as written in the importing document.
        importer (Path): Canonical path of the importing document.
        config_dir (Path): The configuration root directory used for ``@`` entries.

    Returns:
        Path: The resolved path; existence is not checked here.

    Raises:
        ParseError: If the entry does not name a file (``"@"``, ``""``, ``"@/"``).
    """
    if entry.startswith(Toml.ROOT_PREFIX):
        base: Path = config_dir
        raw: str = entry[len(Toml.ROOT_PREFIX) :].lstrip("/")
    else:
        base = importer.parent
        raw = entry

    candidate = Path(raw)
    if candidate.name in ("", ".", ".."):
        raise ParseError(importer, None, f"import entry {entry!r} does not name a file")
    if not candidate.suffix:
        candidate = candidate.with_name(candidate.name + Toml.DEFAULT_SUFFIX)

    resolved: Path = abs_path_from(base, candidate)
    logger.trace("Resolved import %r from %s -> %s", entry, importer, resolved)
    return resolved
