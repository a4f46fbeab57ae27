# topmark:header:start
#
#   project      : ShellConf
#   file         : schema.py
#   file_relpath : src/shellconf/cli/commands/schema.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `schema` command.

Prints the schema as a JSON Schema document (for editor completion and linting of the
configuration files) or, with ``--format toml``, as the ``[[field]]`` entry list that
``--schema`` accepts.
"""

from __future__ import annotations

from pathlib import Path

import click

from shellconf.cli.cmd_common import engine_errors, get_console, load_cli_schema
from shellconf.cli.options import output_format_option
from shellconf.core.formats import OutputFormat
from shellconf.core.keys import ArgKey
from shellconf.io.surgery import write_text_atomic
from shellconf.schema.export import render_schema


@click.command(
    name="schema",
    help="Print the configuration schema (JSON Schema, or the TOML entry list).",
)
@output_format_option(OutputFormat.JSON)
@click.option(
    "--output",
    "-o",
    ArgKey.OUTPUT_PATH,
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the document to this file instead of stdout.",
)
@click.pass_context
def schema_command(
    ctx: click.Context,
    output_format: OutputFormat,
    output_path: Path | None,
) -> None:
    """Render the schema.

    Args:
        ctx (click.Context): Click context.
        output_format (OutputFormat): JSON (default) or TOML.
        output_path (Path | None): Destination file, or ``None`` for stdout.
    """
    console = get_console(ctx)
    text: str = render_schema(load_cli_schema(ctx), output_format)
    if output_path is None:
        console.print(text)
        return
    with engine_errors():
        write_text_atomic(output_path, text if text.endswith("\n") else text + "\n")
    console.print(f"Schema written to {output_path}")
