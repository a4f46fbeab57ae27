# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/io/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O helpers for ShellConf.

This package centralizes helpers for reading, rendering and rewriting TOML documents.
Keeping them separate from the runtime keeps the merge/validation code free of I/O.

TOML parsing/formatting:
    ShellConf uses `tomlkit` for parsing and rendering.

    - `load_document()` parses one on-disk document into a `ConfigSource`.
    - `to_toml()` renders a table (after stripping TOML-incompatible values like `None`).
    - `set_key()` / `remove_key()` perform *lossless* AST surgery so that comments and
      whitespace survive a ``set``/``reset``.

Typical flow:
    1. Resolve the configuration directory (``default_config_dir``).
    2. Load documents (``load_document``), following imports (``resolve_import``).
    3. Rewrite a single key (``set_key`` / ``remove_key``) and persist it with
       ``write_text_atomic``.
"""

from __future__ import annotations

from .guards import is_array, is_mapping, is_number, is_toml_table
from .loaders import ensure_root_config, load_document, parse_toml_text, read_document_text
from .paths import abs_path_from, default_config_dir, default_root_config, resolve_import
from .render import to_toml, to_toml_literal
from .surgery import remove_key, set_key, write_text_atomic
from .types import ConfigSource, TomlTable

__all__ = [
    "ConfigSource",
    "TomlTable",
    "abs_path_from",
    "default_config_dir",
    "default_root_config",
    "ensure_root_config",
    "is_array",
    "is_mapping",
    "is_number",
    "is_toml_table",
    "load_document",
    "parse_toml_text",
    "read_document_text",
    "remove_key",
    "resolve_import",
    "set_key",
    "to_toml",
    "to_toml_literal",
    "write_text_atomic",
]
