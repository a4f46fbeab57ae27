# topmark:header:start
#
#   project      : ShellConf
#   file         : main.py
#   file_relpath : src/shellconf/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf command-line interface.

Key ideas:
- Group-level options (configuration location, schema, timeout, verbosity) are
  initialized once and placed into ``ctx.obj``.
- Each subcommand builds a one-shot engine from that state and maps engine errors
  onto exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shellconf.cli.commands.check import check_command
from shellconf.cli.commands.dump import dump_command
from shellconf.cli.commands.get import get_command
from shellconf.cli.commands.reset import reset_command
from shellconf.cli.commands.schema import schema_command
from shellconf.cli.commands.set import set_command
from shellconf.cli.console import ClickConsole
from shellconf.cli.options import (
    common_engine_options,
    common_verbose_options,
    resolve_verbosity,
)
from shellconf.constants import SHELLCONF_VERSION
from shellconf.core.keys import ArgKey
from shellconf.core.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    config_path: Path | None,
    config_dir: Path | None,
    schema_path: Path | None,
    timeout: float,
) -> None:
    """Initialize shared state on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        config_path (Path | None): Root configuration document from ``--config``.
        config_dir (Path | None): Configuration directory from ``--config-dir``.
        schema_path (Path | None): Schema description file from ``--schema``.
        timeout (float): Reload timeout from ``--timeout``.
    """
    ctx.obj = ctx.obj or {}

    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj[ArgKey.VERBOSITY_LEVEL] = level_cli

    # SHELLCONF_LOG_LEVEL wins over -v/-q.
    level_env: int | None = resolve_env_log_level()
    ctx.obj[ArgKey.LOG_LEVEL] = level_env or level_cli
    setup_logging(level=ctx.obj[ArgKey.LOG_LEVEL])

    ctx.obj[ArgKey.CONFIG_PATH] = config_path
    ctx.obj[ArgKey.CONFIG_DIR] = config_dir
    ctx.obj[ArgKey.SCHEMA_PATH] = schema_path
    ctx.obj[ArgKey.TIMEOUT] = timeout
    ctx.obj["console"] = ClickConsole(enable_color=ctx.color is not False)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="ShellConf: read, change and check the desktop shell configuration.",
)
@click.version_option(SHELLCONF_VERSION, prog_name="shellconf")
@common_verbose_options
@common_engine_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    config_path: Path | None,
    config_dir: Path | None,
    schema_path: Path | None,
    timeout: float,
) -> None:
    """Entry point for the ShellConf CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        config_path=config_path,
        config_dir=config_dir,
        schema_path=schema_path,
        timeout=timeout,
    )


cli.add_command(get_command)

cli.add_command(set_command)

cli.add_command(reset_command)

cli.add_command(schema_command)

cli.add_command(check_command)

cli.add_command(dump_command)

if __name__ == "__main__":
    cli()
