# topmark:header:start
#
#   project      : ShellConf
#   file         : cmd_common.py
#   file_relpath : src/shellconf/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common command utilities for Click-based commands.

Small helpers shared by the commands: building an engine from the group options,
translating engine errors into CLI errors, and rendering values.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

import click

from shellconf.cli.errors import cli_error_from
from shellconf.core.errors import ShellconfError
from shellconf.core.formats import OutputFormat
from shellconf.core.keys import ArgKey
from shellconf.core.logging import get_logger
from shellconf.io.guards import is_mapping
from shellconf.io.render import to_toml, to_toml_literal
from shellconf.runtime.engine import ConfigEngine, EngineOptions
from shellconf.schema.builder import load_default_schema, load_schema

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from shellconf.cli.console import ClickConsole
    from shellconf.core.logging import ShellconfLogger
    from shellconf.schema.model import SchemaNode

logger: ShellconfLogger = get_logger(__name__)


def get_console(ctx: click.Context) -> ClickConsole:
    """Return the console stored on the group context."""
    return ctx.find_root().obj["console"]


@contextmanager
def engine_errors() -> Iterator[None]:
    """Translate engine errors raised in the block into CLI errors with exit codes."""
    try:
        yield
    except ShellconfError as exc:
        logger.debug("Command failed: %r", exc)
        raise cli_error_from(exc) from exc


def load_cli_schema(ctx: click.Context) -> SchemaNode:
    """Load the schema selected with ``--schema`` (or the bundled one)."""
    schema_path: Path | None = ctx.find_root().obj.get(ArgKey.SCHEMA_PATH)
    with engine_errors():
        return load_schema(schema_path) if schema_path is not None else load_default_schema()


def build_engine(ctx: click.Context) -> ConfigEngine:
    """Build an engine from the group options (without starting it).

    The CLI never watches files: every command is one-shot.
    """
    obj: dict[str, Any] = ctx.find_root().obj
    options = EngineOptions(
        reload_timeout=obj.get(ArgKey.TIMEOUT) or EngineOptions().reload_timeout,
        watch_files=False,
    )
    return ConfigEngine(
        obj.get(ArgKey.CONFIG_PATH),
        config_dir=obj.get(ArgKey.CONFIG_DIR),
        schema=load_cli_schema(ctx),
        options=options,
    )


def _json_default(value: object) -> str:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def render_value(value: Any, fmt: OutputFormat) -> str:
    """Render a configuration value for printing.

    Tables render as TOML documents, other values as TOML literals; ``JSON`` renders
    everything as a JSON document.
    """
    if fmt is OutputFormat.JSON:
        return json.dumps(value, indent=2, default=_json_default)
    if is_mapping(value):
        return to_toml(value).rstrip("\n")
    return to_toml_literal(value)
