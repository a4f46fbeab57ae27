# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf package.

ShellConf is the configuration engine of a live desktop shell. It loads a root TOML
document and everything it imports, merges and validates the result against a static
schema, publishes immutable snapshots, reloads them when files change, and writes
``set``/``reset`` mutations back into the document that owns each key.
"""

from __future__ import annotations
