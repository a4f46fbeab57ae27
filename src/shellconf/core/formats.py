# topmark:header:start
#
#   project      : ShellConf
#   file         : formats.py
#   file_relpath : src/shellconf/core/formats.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Output format definitions shared by the CLI and the schema exporter.

This module centralizes the `OutputFormat` enum so commands and serializers agree on
the same format vocabulary without depending on Click.
"""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format for rendered documents.

    Attributes:
        JSON: A single JSON document (pretty-printed, no trailing newline).
        TOML: A TOML document.
    """

    JSON = "json"
    TOML = "toml"
