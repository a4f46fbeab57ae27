# topmark:header:start
#
#   project      : ShellConf
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the ShellConf test suite.

This file sets up global fixtures and customizes the logging configuration for test runs.

Notes:
    Engine tests run with ``watch_files=False`` unless they exercise the watchdog
    observer. Reloads are then driven explicitly (``engine.reload()``, ``set``/``reset``)
    or by submitting synthetic events to the watcher, which keeps them deterministic.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, cast

import pytest

from shellconf.constants import CONFIG_DIR_ENV
from shellconf.core import logging
from shellconf.core.logging import LOG_LEVEL_ENV
from shellconf.runtime.engine import ConfigEngine, EngineOptions
from shellconf.schema.builder import build_schema
from shellconf.schema.model import SchemaNode

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    return as_typed_mark(pytest.mark.parametrize(*args, **kwargs))


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def isolate_shellconf_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure neither the log level nor the config directory is forced via env.

    Args:
        monkeypatch (pytest.MonkeyPatch): Used to remove the environment variables.
    """
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE so failures come with full reload traces.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


# --- schema used by engine tests ---

TEST_SCHEMA_ENTRIES: list[dict[str, Any]] = [
    {"path": "bar", "kind": "table", "description": "The bar."},
    {
        "path": "bar.location",
        "kind": "enum",
        "default": "top",
        "choices": ["top", "bottom", "left", "right"],
    },
    {"path": "bar.scale", "kind": "number", "default": 1.0, "minimum": 0.25, "maximum": 4},
    {"path": "bar.enabled", "kind": "bool", "default": True},
    {"path": "bar.modules", "kind": "array", "items": "string", "default": ["clock"]},
    {"path": "general.font", "kind": "string", "default": "Inter"},
    {
        "path": "general.accent",
        "kind": "string",
        "default": "#89b4fa",
        "pattern": "#[0-9a-f]{6}",
    },
]


@pytest.fixture
def schema() -> SchemaNode:
    """Return a small schema covering every leaf kind."""
    return build_schema(TEST_SCHEMA_ENTRIES)


# --- configuration files ---

WriteDoc = Callable[[str, str], Path]


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Return an empty configuration directory (canonical path)."""
    d: Path = tmp_path / "shellconf"
    d.mkdir()
    return d.resolve()


@pytest.fixture
def write_doc(config_dir: Path) -> WriteDoc:
    """Return a helper writing a dedented document into the configuration directory.

    Returns:
        WriteDoc: ``write_doc(name, text) -> Path`` (canonical path of the file).
    """

    def _write(name: str, text: str) -> Path:
        p: Path = config_dir / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
        return p.resolve()

    return _write


@pytest.fixture
def make_engine(
    config_dir: Path,
    schema: SchemaNode,
) -> Iterator[Callable[..., ConfigEngine]]:
    """Return a factory for started engines on ``config.toml``.

    Keyword arguments are forwarded to `EngineOptions` (``watch_files`` defaults to
    ``False``). Engines are closed on teardown.
    """
    engines: list[ConfigEngine] = []

    def _make(**kwargs: Any) -> ConfigEngine:
        kwargs.setdefault("watch_files", False)
        kwargs.setdefault("debounce", 0.05)
        engine = ConfigEngine(
            config_dir / "config.toml",
            config_dir=config_dir,
            schema=schema,
            options=EngineOptions(**kwargs),
        )
        engines.append(engine)
        return engine.start()

    yield _make
    for engine in engines:
        engine.close()
