# topmark:header:start
#
#   project      : ShellConf
#   file         : constants.py
#   file_relpath : src/shellconf/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Final

try:
    SHELLCONF_VERSION: str = get_version("shellconf")
except PackageNotFoundError:  # running from a source checkout
    SHELLCONF_VERSION = "0.0.0"

APP_DIR_NAME: Final[str] = "shellconf"
ROOT_CONFIG_NAME: Final[str] = "config.toml"

CONFIG_DIR_ENV: Final[str] = "SHELLCONF_CONFIG_DIR"

DEFAULT_SCHEMA_PACKAGE: Final[str] = "shellconf.schema"
DEFAULT_SCHEMA_NAME: Final[str] = "shell-schema.toml"

# Secret files in the configuration directory: `.env` plus any `.<name>.env`.
ENV_FILE_NAME: Final[str] = ".env"
ENV_FILE_GLOB: Final[str] = ".*.env"

# Reload watcher tuning
DEBOUNCE_SECONDS: Final[float] = 0.1
# A steady stream of events delays a pass by at most this many debounce windows.
DEBOUNCE_MAX_FACTOR: Final[int] = 10
RELOAD_TIMEOUT_SECONDS: Final[float] = 2.0
EVENT_QUEUE_SIZE: Final[int] = 256

ROOT_CONFIG_BANNER: Final[str] = (
    "# ShellConf configuration.\n"
    "# Split settings into other files with: imports = [\"@bar.toml\"]\n"
)

# One key of a dotted path (``bar``, ``font-size``, ``_private``).
IDENT_PATTERN: Final[str] = r"[A-Za-z_][A-Za-z0-9_-]*"
