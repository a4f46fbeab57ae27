# topmark:header:start
#
#   project      : ShellConf
#   file         : get.py
#   file_relpath : src/shellconf/cli/commands/get.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `get` command.

Prints the effective value at a dotted path: a TOML literal for leaves, a TOML document
for tables, or JSON with ``--format json``. If the configuration does not load, the value
printed is the one the shell falls back to (schema defaults) and a warning is shown.
"""

from __future__ import annotations

import click

from shellconf.cli.cli_types import DottedPathParam
from shellconf.cli.cmd_common import build_engine, engine_errors, get_console, render_value
from shellconf.cli.options import output_format_option
from shellconf.core.formats import OutputFormat


@click.command(
    name="get",
    help="Print the effective value at PATH (empty PATH prints everything).",
)
@click.argument("path", type=DottedPathParam(), default="")
@output_format_option(OutputFormat.TOML)
@click.pass_context
def get_command(ctx: click.Context, path: str, output_format: OutputFormat) -> None:
    """Print the effective value at ``path``.

    Args:
        ctx (click.Context): Click context.
        path (str): Dotted path.
        output_format (OutputFormat): TOML (default) or JSON.
    """
    console = get_console(ctx)
    engine = build_engine(ctx)
    with engine_errors():
        with engine:
            if engine.last_error is not None:
                console.warn(f"Configuration failed to load, showing defaults: {engine.last_error}")
            value = engine.get(path)
    console.print(render_value(value, output_format))
