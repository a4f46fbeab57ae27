# topmark:header:start
#
#   project      : ShellConf
#   file         : set.py
#   file_relpath : src/shellconf/cli/commands/set.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `set` command.

``shellconf set bar.location bottom`` rewrites ``bar.location`` in the document that
currently owns it (the root document for a defaulted value) and waits for the reload.
VALUE is a TOML literal; strings and enum members may be given unquoted.
"""

from __future__ import annotations

import logging

import click

from shellconf.cli.cli_types import DottedPathParam
from shellconf.cli.cmd_common import build_engine, engine_errors, get_console
from shellconf.core.keys import ArgKey
from shellconf.io.render import to_toml_literal


@click.command(
    name="set",
    help="Set PATH to VALUE (a TOML literal) in the document that owns it.",
)
@click.argument("path", type=DottedPathParam())
@click.argument("value")
@click.pass_context
def set_command(ctx: click.Context, path: str, value: str) -> None:
    """Set ``path`` to ``value`` and wait for the reload.

    Args:
        ctx (click.Context): Click context.
        path (str): Dotted path of a leaf or array element.
        value (str): TOML literal.
    """
    console = get_console(ctx)
    engine = build_engine(ctx)
    with engine_errors():
        with engine:
            snapshot = engine.set(path, value)
            new_value = snapshot.value(path)
            owner = snapshot.provenance(path)
    if ctx.find_root().obj[ArgKey.VERBOSITY_LEVEL] <= logging.INFO:
        console.print(
            f"{path} = {to_toml_literal(new_value)}  ({owner}, version {snapshot.version})",
        )
