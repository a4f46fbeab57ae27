# topmark:header:start
#
#   project      : ShellConf
#   file         : __main__.py
#   file_relpath : src/shellconf/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running ShellConf via ``python -m shellconf``.

Equivalent to running the ``shellconf`` console script; it delegates to
[`shellconf.cli.main.cli`][shellconf.cli.main.cli].
"""

from __future__ import annotations

from shellconf.cli.main import cli

if __name__ == "__main__":
    cli()
