# topmark:header:start
#
#   project      : ShellConf
#   file         : options.py
#   file_relpath : src/shellconf/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options and their resolution logic.

This module centralizes reusable option groups (verbosity, engine location, output
format) so the group and the commands stay thin.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, ParamSpec, TypeVar

import click

from shellconf.cli.cli_types import EnumChoiceParam
from shellconf.cli.errors import ShellconfUsageError
from shellconf.constants import CONFIG_DIR_ENV, RELOAD_TIMEOUT_SECONDS
from shellconf.core.formats import OutputFormat
from shellconf.core.keys import ArgKey
from shellconf.core.logging import TRACE_LEVEL

P = ParamSpec("P")
R = TypeVar("R")

LOG_LEVELS: dict[str, int] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the logging level from ``-v``/``-q`` counts.

    Args:
        verbose_count (int): Number of ``-v`` flags.
        quiet_count (int): Number of ``-q`` flags.

    Returns:
        int: The logging level (``-vvv`` TRACE, ``-vv`` DEBUG, ``-v`` INFO, ``-q`` ERROR,
        WARNING otherwise).

    Raises:
        ShellconfUsageError: If both flags are used together.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise ShellconfUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return LOG_LEVELS["TRACE"]
    if verbose_count == 2:
        return LOG_LEVELS["DEBUG"]
    if verbose_count == 1:
        return LOG_LEVELS["INFO"]
    if quiet_count >= 1:
        return LOG_LEVELS["ERROR"]
    return LOG_LEVELS["WARNING"]


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` (counted, mutually exclusive)."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Repeat for more detail (up to -vvv).",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Only report errors.",
    )(f)
    return f


def common_engine_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the options that locate the configuration and the schema."""
    f = click.option(
        "--config",
        ArgKey.CONFIG_PATH,
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Root configuration document (default: config.toml in the config directory).",
    )(f)
    f = click.option(
        "--config-dir",
        ArgKey.CONFIG_DIR,
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        envvar=CONFIG_DIR_ENV,
        help="Directory '@' imports resolve against.",
    )(f)
    f = click.option(
        "--schema",
        ArgKey.SCHEMA_PATH,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Schema description file (TOML or JSON); defaults to the bundled shell schema.",
    )(f)
    f = click.option(
        "--timeout",
        ArgKey.TIMEOUT,
        type=click.FloatRange(min=0.0, min_open=True),
        default=RELOAD_TIMEOUT_SECONDS,
        show_default=True,
        help="Seconds to wait for the reload after set/reset.",
    )(f)
    return f


def output_format_option(default: OutputFormat) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Return a ``--format`` option decorator with the given default."""
    return click.option(
        "--format",
        ArgKey.OUTPUT_FORMAT,
        type=EnumChoiceParam(OutputFormat),
        default=default.value,
        show_default=True,
        help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
    )
