# topmark:header:start
#
#   project      : ShellConf
#   file         : secrets.py
#   file_relpath : src/shellconf/secrets.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Secret references resolved from the environment and ``.env`` files.

Configuration documents never need to hold credentials. A string value written as a
bare variable reference is replaced by that variable's value during each pipeline pass:

```toml
[modules.weather]
api-key = "$WEATHER_API_KEY"
```

Lookup order:
    1. the process environment;
    2. ``.env`` and ``.*.env`` files in the configuration directory, read in
       alphabetical order with [`python-dotenv`](https://pypi.org/project/python-dotenv/)
       (later files override earlier ones).

The process environment is never modified. An unset variable is logged as a warning and
the key is dropped from the merged tree, so its schema default applies. Only whole-value
references (``"$NAME"``) are resolved; strings such as ``"$5 plan"`` or ``"a$B"`` stay
literal. The env files take part in the reload file set, so editing, adding or removing
one triggers a reload.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from dotenv import dotenv_values

from shellconf.constants import ENV_FILE_GLOB, ENV_FILE_NAME
from shellconf.core.logging import get_logger
from shellconf.merge import MergedLeaf, MergedTable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger
    from shellconf.merge import MergedNode

logger: ShellconfLogger = get_logger(__name__)

SECRET_REF_RE: re.Pattern[str] = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def is_env_file(path: Path) -> bool:
    """Whether ``path`` is named like a secret file (``.env`` or ``.<name>.env``)."""
    name: str = path.name
    return name.startswith(".") and name.endswith(ENV_FILE_NAME)


def collect_env_files(config_dir: Path) -> list[Path]:
    """Return the secret files of ``config_dir`` in load order."""
    if not config_dir.is_dir():
        return []
    found: set[Path] = {p for p in config_dir.glob(ENV_FILE_GLOB) if p.is_file()}
    base: Path = config_dir / ENV_FILE_NAME
    if base.is_file():
        found.add(base)
    return sorted(found)


@dataclass(frozen=True, slots=True)
class SecretEnv:
    """Variables read from the secret files of one pass.

    Attributes:
        values (Mapping[str, str]): Variables defined by the files.
        files (frozenset[Path]): The files that were read.
    """

    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    files: frozenset[Path] = frozenset()

    def lookup(self, name: str) -> str | None:
        """Return ``name`` from the process environment, else from the files."""
        value: str | None = os.environ.get(name)
        if value is None:
            value = self.values.get(name)
        return value


def load_env_files(config_dir: Path) -> SecretEnv:
    """Read every secret file of ``config_dir``.

    A file that cannot be read is skipped with a warning; secrets never fail a pass.

    Args:
        config_dir (Path): The configuration directory.

    Returns:
        SecretEnv: The merged variables and the files read.
    """
    values: dict[str, str] = {}
    files: list[Path] = []
    for path in collect_env_files(config_dir):
        try:
            parsed: dict[str, str | None] = dotenv_values(path, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot load env file %s: %s", path, exc)
            continue
        values.update({k: v for k, v in parsed.items() if v is not None})
        files.append(path)
        logger.debug("Loaded env file %s (%d variables)", path, len(parsed))
    return SecretEnv(values=MappingProxyType(values), files=frozenset(files))


def _resolve_table(table: MergedTable, env: SecretEnv, prefix: str) -> MergedTable:
    children: dict[str, MergedNode] = {}
    for key, child in table.children.items():
        path: str = f"{prefix}.{key}" if prefix else key
        if isinstance(child, MergedTable):
            children[key] = _resolve_table(child, env, path)
            continue
        match: re.Match[str] | None = (
            SECRET_REF_RE.fullmatch(child.value) if isinstance(child.value, str) else None
        )
        if match is None:
            children[key] = child
            continue
        value: str | None = env.lookup(match.group(1))
        if value is None:
            logger.warning(
                "Environment variable %s is not set; %s falls back to its default",
                match.group(1),
                path,
            )
            continue
        logger.trace("Resolved secret reference at %s", path)
        children[key] = MergedLeaf(value=value, provenance=child.provenance)
    return MergedTable(children=MappingProxyType(children), schema=table.schema)


def resolve_secrets(tree: MergedTable, env: SecretEnv) -> MergedTable:
    """Replace ``"$NAME"`` string leaves of a merged tree by their variable values.

    Args:
        tree (MergedTable): Output of [`merge`][shellconf.merge.merge].
        env (SecretEnv): Variables of the secret files.

    Returns:
        MergedTable: A new tree; leaves referencing unset variables are left out.
    """
    return _resolve_table(tree, env, "")
