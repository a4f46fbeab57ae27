# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core primitives shared across ShellConf.

The ``shellconf.core`` package provides small building blocks that are safe to import
from anywhere in the codebase (CLI, loaders, runtime, tests).

Included modules:

- ``logging``
  TRACE-capable logger class and the colored log formatter.

- ``errors``
  The error taxonomy raised by loading, validation, path resolution and mutation.

- ``keys``
  Reserved document keys, schema entry keys and CLI context keys.

- ``formats``
  The `OutputFormat` vocabulary shared by the CLI and the schema exporter.
"""

from __future__ import annotations
