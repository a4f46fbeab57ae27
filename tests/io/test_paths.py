# topmark:header:start
#
#   project      : ShellConf
#   file         : test_paths.py
#   file_relpath : tests/io/test_paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for configuration directory and import path resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shellconf.constants import CONFIG_DIR_ENV
from shellconf.core.errors import ParseError
from shellconf.io.paths import default_config_dir, default_root_config, resolve_import
from tests.conftest import parametrize

if TYPE_CHECKING:
    from pathlib import Path


@parametrize(
    "entry, expected",
    [
        ("@bar.toml", "bar.toml"),
        ("@/bar.toml", "bar.toml"),
        ("@themes/dark", "themes/dark.toml"),
    ],
)
def test_root_prefixed_imports_resolve_against_config_dir(
    tmp_path: Path,
    entry: str,
    expected: str,
) -> None:
    """`@` entries are anchored at the configuration directory."""
    config_dir: Path = tmp_path / "cfg"
    importer: Path = config_dir / "sub" / "importer.toml"
    assert resolve_import(entry, importer, config_dir) == (config_dir / expected).resolve()


def test_relative_imports_resolve_against_importer(tmp_path: Path) -> None:
    """Plain entries are relative to the importing file and get `.toml` appended."""
    config_dir: Path = tmp_path / "cfg"
    importer: Path = config_dir / "sub" / "importer.toml"
    assert resolve_import("../colors", importer, config_dir) == (
        config_dir / "colors.toml"
    ).resolve()
    assert resolve_import("local.conf", importer, config_dir) == (
        config_dir / "sub" / "local.conf"
    ).resolve()


@parametrize("entry", ["@", "@/", "", "@.."])
def test_imports_without_a_file_name_are_parse_errors(tmp_path: Path, entry: str) -> None:
    """An entry that names no file is reported against the importing document."""
    importer: Path = tmp_path / "cfg" / "config.toml"
    with pytest.raises(ParseError) as excinfo:
        resolve_import(entry, importer, tmp_path / "cfg")
    assert excinfo.value.file == importer


def test_default_config_dir_prefers_env(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """SHELLCONF_CONFIG_DIR wins over XDG_CONFIG_HOME."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert default_config_dir() == (tmp_path / "xdg" / "shellconf").resolve()
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "explicit"))
    assert default_config_dir() == (tmp_path / "explicit").resolve()
    assert default_root_config() == (tmp_path / "explicit" / "config.toml").resolve()
