# topmark:header:start
#
#   project      : ShellConf
#   file         : reset.py
#   file_relpath : src/shellconf/cli/commands/reset.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `reset` command.

Removes PATH from the document that defines it, so the value falls through to a
lower-priority document or to the schema default. Resetting a table resets every leaf
below it; resetting a defaulted value does nothing.
"""

from __future__ import annotations

import click

from shellconf.cli.cli_types import DottedPathParam
from shellconf.cli.cmd_common import build_engine, engine_errors, get_console, render_value
from shellconf.core.formats import OutputFormat


@click.command(
    name="reset",
    help="Remove PATH from the document that defines it and print the new effective value.",
)
@click.argument("path", type=DottedPathParam())
@click.pass_context
def reset_command(ctx: click.Context, path: str) -> None:
    """Reset ``path`` and print the value it falls back to.

    Args:
        ctx (click.Context): Click context.
        path (str): Dotted path of a leaf or table.
    """
    console = get_console(ctx)
    engine = build_engine(ctx)
    with engine_errors():
        with engine:
            snapshot = engine.reset(path)
            value = snapshot.value(path)
    console.print(render_value(value, OutputFormat.TOML))
