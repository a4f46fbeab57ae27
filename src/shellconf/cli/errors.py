# topmark:header:start
#
#   project      : ShellConf
#   file         : errors.py
#   file_relpath : src/shellconf/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the ShellConf CLI.

Engine errors are Click-free; [`cli_error_from`][shellconf.cli.errors.cli_error_from]
maps them onto these `click.ClickException` subclasses, each carrying its exit code.

Styling:
    Exceptions prefer the project console if available (see `show()`); otherwise they
    fall back to Click's default error display.
"""

from __future__ import annotations

from typing import IO, Any

import click

from shellconf.cli.exit_codes import ExitCode
from shellconf.core.errors import (
    ConfigValidationError,
    EngineStateError,
    ImportCycleError,
    ImportNotFoundError,
    ParseError,
    PathNotFoundError,
    PathSyntaxError,
    ReloadTimeoutError,
    SchemaDefinitionError,
    ShellconfError,
    SourceReadError,
    ValidationError,
    WriteBackError,
)


class ShellconfCliError(click.ClickException):
    """Base class for all ShellConf CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        console: Any = None
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
        if console is None:
            super().show(file)
            return
        console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))


class ShellconfUsageError(ShellconfCliError):
    """Invalid invocation or malformed dotted path."""

    exit_code = ExitCode.USAGE_ERROR


class ShellconfDataError(ShellconfCliError):
    """A value or the configuration violates the schema."""

    exit_code = ExitCode.DATA_ERROR


class ShellconfNotFoundError(ShellconfCliError):
    """Unknown path or missing imported file."""

    exit_code = ExitCode.NOT_FOUND


class ShellconfIOError(ShellconfCliError):
    """A document cannot be read or written."""

    exit_code = ExitCode.IO_ERROR


class ShellconfTimeoutError(ShellconfCliError):
    """The reload did not finish in time."""

    exit_code = ExitCode.TEMP_FAILURE


class ShellconfConfigError(ShellconfCliError):
    """A configuration or schema document is malformed."""

    exit_code = ExitCode.CONFIG_ERROR


class ShellconfSoftwareError(ShellconfCliError):
    """Internal error."""

    exit_code = ExitCode.SOFTWARE


# Most specific classes first.
_ERROR_MAP: tuple[tuple[type[ShellconfError], type[ShellconfCliError]], ...] = (
    (PathSyntaxError, ShellconfUsageError),
    (PathNotFoundError, ShellconfNotFoundError),
    (ImportNotFoundError, ShellconfNotFoundError),
    (ValidationError, ShellconfDataError),
    (ConfigValidationError, ShellconfDataError),
    (SourceReadError, ShellconfIOError),
    (WriteBackError, ShellconfIOError),
    (ParseError, ShellconfConfigError),
    (ImportCycleError, ShellconfConfigError),
    (SchemaDefinitionError, ShellconfConfigError),
    (ReloadTimeoutError, ShellconfTimeoutError),
    (EngineStateError, ShellconfSoftwareError),
)


def cli_error_from(exc: ShellconfError) -> ShellconfCliError:
    """Return the CLI error (with exit code) for an engine error."""
    for engine_cls, cli_cls in _ERROR_MAP:
        if isinstance(exc, engine_cls):
            return cli_cls(str(exc))
    return ShellconfCliError(str(exc))
