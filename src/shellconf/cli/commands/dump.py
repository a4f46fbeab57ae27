# topmark:header:start
#
#   project      : ShellConf
#   file         : dump.py
#   file_relpath : src/shellconf/cli/commands/dump.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `dump` command.

Prints the effective configuration (every leaf, defaults included) as a TOML document.
With ``--provenance``, prints one line per leaf instead, naming the document that owns
it or ``(default)``.
"""

from __future__ import annotations

import click

from shellconf.cli.cmd_common import build_engine, engine_errors, get_console, render_value
from shellconf.cli.options import output_format_option
from shellconf.core.formats import OutputFormat
from shellconf.core.keys import ArgKey
from shellconf.io.render import to_toml_literal
from shellconf.merge import thaw


@click.command(
    name="dump",
    help="Print the effective configuration.",
)
@output_format_option(OutputFormat.TOML)
@click.option(
    "--provenance",
    ArgKey.PROVENANCE,
    is_flag=True,
    default=False,
    help="List each leaf with the document that owns it.",
)
@click.pass_context
def dump_command(ctx: click.Context, output_format: OutputFormat, provenance: bool) -> None:
    """Print the effective configuration.

    Args:
        ctx (click.Context): Click context.
        output_format (OutputFormat): TOML (default) or JSON.
        provenance (bool): List leaves with their owning document.
    """
    console = get_console(ctx)
    engine = build_engine(ctx)
    with engine_errors():
        with engine:
            if engine.last_error is not None:
                console.warn(f"Configuration failed to load, showing defaults: {engine.last_error}")
            snapshot = engine.current()

    if not provenance:
        console.print(render_value(snapshot.to_dict(), output_format))
        return

    if output_format is OutputFormat.JSON:
        rows = [
            {"path": path, "value": thaw(leaf.value), "source": str(leaf.provenance or "")}
            for path, leaf in snapshot.leaves()
        ]
        console.print(render_value(rows, OutputFormat.JSON))
        return

    for path, leaf in snapshot.leaves():
        source: str = str(leaf.provenance) if leaf.provenance is not None else "(default)"
        console.print(f"{path} = {to_toml_literal(thaw(leaf.value))}  # {source}")
