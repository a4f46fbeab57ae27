# topmark:header:start
#
#   project      : ShellConf
#   file         : test_engine.py
#   file_relpath : tests/runtime/test_engine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""End-to-end tests for `ConfigEngine`: loading, reloads, errors and subscriptions."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from shellconf.core.errors import (
    ConfigValidationError,
    EngineStateError,
    ImportCycleError,
    ImportNotFoundError,
    LoadError,
    ParseError,
    TypeMismatchError,
)
from shellconf.runtime.engine import ConfigEngine, EngineOptions
from shellconf.runtime.notifier import ChangeEvent, ReloadErrorEvent
from tests.conftest import mark_integration

if TYPE_CHECKING:
    from collections.abc import Callable

    from shellconf.schema.model import SchemaNode
    from tests.conftest import WriteDoc

    MakeEngine = Callable[..., ConfigEngine]


def test_root_outranks_its_imports(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
    config_dir: Path,
) -> None:
    """A root value wins over the same key in an imported file."""
    write_doc(
        "config.toml",
        """
        imports = ["@a.toml"]

        [bar]
        scale = 1
        """,
    )
    write_doc("a.toml", "[bar]\nscale = 2\nlocation = \"left\"\n")
    engine = make_engine()
    assert engine.get("bar.scale") == 1
    assert engine.get("bar.location") == "left"
    assert engine.provenance("bar.scale") == config_dir / "config.toml"
    assert engine.provenance("bar.location") == config_dir / "a.toml"
    assert engine.current().version == 1
    assert engine.last_error is None


def test_missing_root_is_created(make_engine: MakeEngine, config_dir: Path) -> None:
    """Starting without a root document creates one and serves the defaults."""
    engine = make_engine()
    assert (config_dir / "config.toml").is_file()
    assert engine.get("") == {
        "bar": {"location": "top", "scale": 1.0, "enabled": True, "modules": ["clock"]},
        "general": {"font": "Inter", "accent": "#89b4fa"},
    }


def test_broken_start_publishes_defaults(make_engine: MakeEngine, write_doc: WriteDoc) -> None:
    """A failing first pass still publishes a snapshot, built from defaults."""
    write_doc("config.toml", 'imports = ["@missing.toml"]\n[bar]\nlocation = "left"\n')
    engine = make_engine()
    assert isinstance(engine.last_error, ImportNotFoundError)
    assert engine.current().version == 1
    assert engine.get("bar.location") == "top"


def test_startup_error_reaches_listeners(
    config_dir: Path,
    schema: SchemaNode,
    write_doc: WriteDoc,
) -> None:
    """Listeners registered before `start` see the failure of the first pass."""
    write_doc("config.toml", "[bar]\nscale = 99\n")
    errors: list[ReloadErrorEvent] = []
    engine = ConfigEngine(
        config_dir / "config.toml",
        schema=schema,
        options=EngineOptions(watch_files=False),
    )
    engine.add_error_listener(errors.append)
    with engine:
        [event] = errors
        assert event.version == 1
        assert isinstance(event.error, ConfigValidationError)
        assert engine.get("bar.scale") == 1.0


def test_cycle_keeps_previous_snapshot(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
    config_dir: Path,
) -> None:
    """A cycle introduced by an edit is reported and the prior snapshot stays current."""
    root: Path = write_doc("config.toml", 'imports = ["@b.toml"]\n[bar]\nscale = 2\n')
    write_doc("b.toml", "")
    engine = make_engine()
    errors: list[ReloadErrorEvent] = []
    engine.add_error_listener(errors.append)
    before = engine.current()

    b: Path = write_doc("b.toml", 'imports = ["@config.toml"]\n')
    assert engine.reload() is before
    assert isinstance(engine.last_error, ImportCycleError)
    assert engine.last_error.chain == (root, b, root)
    [event] = errors
    assert event.version == before.version
    assert b in event.files
    assert config_dir / "config.toml" in event.files


def test_type_mismatch_keeps_previous_snapshot(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
) -> None:
    """A bad value in one file fires an error event; readers keep the old values."""
    write_doc("config.toml", 'imports = ["@bar.toml"]\n')
    write_doc("bar.toml", "[bar]\nscale = 2\n")
    engine = make_engine()
    errors: list[ReloadErrorEvent] = []
    engine.add_error_listener(errors.append)

    write_doc("bar.toml", '[bar]\nscale = "huge"\n')
    snapshot = engine.reload()
    assert snapshot.version == 1
    assert snapshot.value("bar.scale") == 2
    [event] = errors
    assert isinstance(event.error, ConfigValidationError)
    [problem] = event.error.errors
    assert isinstance(problem, TypeMismatchError)
    assert problem.path == "bar.scale"

    write_doc("bar.toml", "[bar]\nscale = 3\n")
    assert engine.reload().value("bar.scale") == 3
    assert engine.last_error is None


def test_nameless_import_does_not_break_start(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
    config_dir: Path,
) -> None:
    """An ``imports`` entry naming no file fails the pass, not the engine."""
    write_doc("config.toml", 'imports = ["@"]\n')
    engine = make_engine()
    assert isinstance(engine.last_error, ParseError)
    assert engine.last_error.file == config_dir / "config.toml"
    assert engine.get("bar.location") == "top"


def test_unexpected_reload_failure_is_reported(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Any exception raised by a pass becomes an error event; the snapshot is kept."""
    write_doc("config.toml", "[bar]\nscale = 2\n")
    engine = make_engine()
    errors: list[ReloadErrorEvent] = []
    engine.add_error_listener(errors.append)
    before = engine.current()

    def _explode(*args: object, **kwargs: object) -> None:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(engine.pipeline, "run", _explode)
    assert engine.reload() is before
    assert isinstance(engine.last_error, LoadError)
    assert isinstance(engine.last_error.__cause__, RuntimeError)
    [event] = errors
    assert event.error is engine.last_error
    assert event.version == before.version


def test_secret_reference_follows_env_file(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
    config_dir: Path,
) -> None:
    """A `$NAME` value is read from `.env`; editing the file changes it on reload."""
    write_doc("config.toml", '[general]\nfont = "$SHELLCONF_TEST_FONT"\n')
    env_file: Path = write_doc(".env", "SHELLCONF_TEST_FONT=Fira Sans\n")
    engine = make_engine()
    assert engine.get("general.font") == "Fira Sans"
    assert engine.provenance("general.font") == config_dir / "config.toml"
    assert env_file in engine.current().files
    assert engine.watcher.is_monitored(env_file)
    assert engine.watcher.is_monitored(config_dir / ".theme.env")
    assert not engine.watcher.is_monitored(config_dir / "notes.env")

    write_doc(".env", "SHELLCONF_TEST_FONT=Noto Sans\n")
    assert engine.reload().value("general.font") == "Noto Sans"

    env_file.unlink()
    assert engine.reload().value("general.font") == "Inter"
    assert engine.last_error is None


def test_secret_is_validated_after_resolution(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
) -> None:
    """Constraints apply to the resolved value, not to the reference."""
    write_doc("config.toml", '[general]\naccent = "$SHELLCONF_TEST_ACCENT"\n')
    write_doc(".colors.env", "SHELLCONF_TEST_ACCENT=red\n")
    engine = make_engine()
    assert isinstance(engine.last_error, ConfigValidationError)

    write_doc(".colors.env", "SHELLCONF_TEST_ACCENT=#a6e3a1\n")
    assert engine.reload().value("general.accent") == "#a6e3a1"


def test_subscription_receives_reload_changes(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
) -> None:
    """Subscribers get one event per changed version, with the new subtree."""
    write_doc("config.toml", "[bar]\nscale = 1\n")
    engine = make_engine()
    seen: list[ChangeEvent] = []
    sub = engine.subscribe("bar", seen.append)
    font = engine.subscribe("general.font")

    write_doc("config.toml", "[bar]\nscale = 1.5\n")
    engine.reload()
    event = sub.get(timeout=1.0)
    assert event is not None
    assert event.version == 2
    assert event.value["scale"] == 1.5
    assert seen == [event]
    assert font.pending() == []

    engine.unsubscribe(sub)
    write_doc("config.toml", "[bar]\nscale = 2\n")
    engine.reload()
    assert sub.pending() == []


def test_lifecycle_errors(config_dir: Path, schema: SchemaNode) -> None:
    """Mutations need a started engine; starting twice is an error."""
    engine = ConfigEngine(
        config_dir / "config.toml",
        schema=schema,
        options=EngineOptions(watch_files=False),
    )
    with pytest.raises(EngineStateError):
        engine.set("bar.location", "left")
    with pytest.raises(EngineStateError):
        engine.current()
    with engine:
        assert engine.config_dir == config_dir
        with pytest.raises(EngineStateError):
            engine.start()
    with pytest.raises(EngineStateError):
        engine.reload()
    engine.close()


@mark_integration
def test_live_edit_is_picked_up(make_engine: MakeEngine, write_doc: WriteDoc) -> None:
    """With file watching on, an external edit is reloaded without an explicit call."""
    write_doc("config.toml", '[bar]\nlocation = "top"\n')
    engine = make_engine(watch_files=True)
    sub = engine.subscribe("bar.location")
    time.sleep(0.2)

    write_doc("config.toml", '[bar]\nlocation = "right"\n')
    event = sub.get(timeout=5.0)
    assert event is not None
    assert event.value == "right"
    assert engine.get("bar.location") == "right"


@mark_integration
def test_new_secret_file_is_picked_up(
    make_engine: MakeEngine,
    write_doc: WriteDoc,
) -> None:
    """Creating a secret file on disk reloads the configuration that references it."""
    write_doc("config.toml", '[general]\nfont = "$SHELLCONF_TEST_LIVE_FONT"\n')
    engine = make_engine(watch_files=True)
    assert engine.get("general.font") == "Inter"
    sub = engine.subscribe("general.font")
    time.sleep(0.2)

    write_doc(".fonts.env", "SHELLCONF_TEST_LIVE_FONT=Cantarell\n")
    event = sub.get(timeout=5.0)
    assert event is not None
    assert event.value == "Cantarell"
