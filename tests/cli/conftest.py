# topmark:header:start
#
#   project      : ShellConf
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running ShellConf against a temporary configuration directory.

`run_cli` invokes the Click group with ``--config-dir`` pointing at the test directory,
so commands never touch the user's real configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from click.testing import CliRunner, Result

from shellconf.cli.exit_codes import ExitCode
from shellconf.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


def run_cli(config_dir: Path | None, argv: Sequence[str]) -> Result:
    """Invoke the CLI with an explicit configuration directory.

    Args:
        config_dir (Path | None): Directory passed as ``--config-dir``; ``None`` omits the
            option (e.g. for ``--help`` / ``--version``).
        argv (Sequence[str]): Arguments after the global options, e.g.
            ``["get", "bar.location"]``.

    Returns:
        Result: The `click.testing.Result` produced by `CliRunner.invoke`.

    Example:
        ```python
        result = run_cli(config_dir, ["get", "bar.location"])
        assert result.exit_code == ExitCode.SUCCESS
        ```
    """
    runner = CliRunner()
    args: list[str] = [] if config_dir is None else ["--config-dir", str(config_dir)]
    return runner.invoke(cli, [*args, *argv])


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0).

    Args:
        result (Result): The Result object returned by `run_cli`.
    """
    assert result.exit_code == ExitCode.SUCCESS, result.output
