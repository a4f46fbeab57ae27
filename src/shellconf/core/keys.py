# topmark:header:start
#
#   project      : ShellConf
#   file         : keys.py
#   file_relpath : src/shellconf/core/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared canonical keys.

This module defines the stable key names used across ShellConf: directive keys inside
configuration documents, entry keys of the static schema description, and the keys
stored on the Click context object.

Notes:
    - Keep this module behavior-free; it should remain a pure namespace for
      constants so it can be imported from anywhere without causing cycles.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """Reserved keys and markers inside configuration documents."""

    KEY_IMPORTS: Final[str] = "imports"

    # Import entries starting with this prefix resolve against the config directory.
    ROOT_PREFIX: Final[str] = "@"

    DEFAULT_SUFFIX: Final[str] = ".toml"


class SchemaKey:
    """Entry keys of the static schema description (``[[field]]`` tables)."""

    SECTION_FIELD: Final[str] = "field"

    PATH: Final[str] = "path"
    KIND: Final[str] = "kind"
    DEFAULT: Final[str] = "default"
    DESCRIPTION: Final[str] = "description"
    MINIMUM: Final[str] = "minimum"
    MAXIMUM: Final[str] = "maximum"
    CHOICES: Final[str] = "choices"
    PATTERN: Final[str] = "pattern"
    ITEMS: Final[str] = "items"


class ArgKey:
    """Canonical keys stored in ``click.Context.obj`` and used as option destinations."""

    CONFIG_PATH: Final[str] = "config_path"
    CONFIG_DIR: Final[str] = "config_dir"
    SCHEMA_PATH: Final[str] = "schema_path"
    TIMEOUT: Final[str] = "timeout"
    VERBOSITY_LEVEL: Final[str] = "verbosity_level"
    LOG_LEVEL: Final[str] = "log_level"
    OUTPUT_FORMAT: Final[str] = "output_format"
    OUTPUT_PATH: Final[str] = "output_path"
    PROVENANCE: Final[str] = "provenance"
