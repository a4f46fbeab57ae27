# topmark:header:start
#
#   project      : ShellConf
#   file         : check.py
#   file_relpath : src/shellconf/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf `check` command.

Runs the reload pipeline once (Load -> Resolve -> Merge -> Validate) without publishing
anything, and reports every problem found. Validation errors are listed one per line;
the exit code tells load failures (configuration error, missing import) from schema
violations (data error).
"""

from __future__ import annotations

import click

from shellconf.cli.cmd_common import build_engine, get_console
from shellconf.cli.errors import cli_error_from
from shellconf.cli.exit_codes import ExitCode
from shellconf.core.errors import ConfigValidationError, ShellconfError


@click.command(
    name="check",
    help="Load and validate the configuration, listing every error.",
)
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Validate the configuration files.

    Args:
        ctx (click.Context): Click context.
    """
    console = get_console(ctx)
    engine = build_engine(ctx)
    try:
        snapshot = engine.pipeline.run()
    except ConfigValidationError as exc:
        for error in exc.errors:
            console.error(f"  {error}")
        console.error(
            console.styled(f"{len(exc.errors)} validation error(s)", fg="bright_red", bold=True),
        )
        ctx.exit(ExitCode.DATA_ERROR)
    except ShellconfError as exc:
        raise cli_error_from(exc) from exc
    else:
        documents: int = len({src.path for src in snapshot.sources})
        console.print(
            console.styled("OK", fg="green", bold=True)
            + f": {engine.root_path} ({documents} document(s))",
        )
