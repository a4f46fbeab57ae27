# topmark:header:start
#
#   project      : ShellConf
#   file         : engine.py
#   file_relpath : src/shellconf/runtime/engine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The configuration engine facade.

[`ConfigEngine`][shellconf.runtime.engine.ConfigEngine] wires the runtime together:

```text
file write / set / reset
        |
  ReloadWatcher ──> ReloadPipeline (Load -> Resolve -> Merge -> Secrets -> Validate)
        |                 |
        |        success: ConfigStore.publish ──> ChangeNotifier.notify
        |        failure: keep snapshot ──────> ChangeNotifier.notify_error
```

Usage:

```python
with ConfigEngine(options=EngineOptions(watch_files=True)) as engine:
    engine.get("bar.location")
    sub = engine.subscribe("bar")
    engine.set("bar.location", "bottom")
    event = sub.get(timeout=1.0)
```

Startup never fails on a broken configuration: if the first pass fails, the engine
publishes a snapshot built from schema defaults only, reports the error to error
listeners (and ``last_error``), and keeps watching the files that would fix it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shellconf.constants import (
    DEBOUNCE_SECONDS,
    EVENT_QUEUE_SIZE,
    RELOAD_TIMEOUT_SECONDS,
)
from shellconf.core.errors import EngineStateError, LoadError, ShellconfError
from shellconf.core.logging import get_logger
from shellconf.io.loaders import ensure_root_config
from shellconf.io.paths import default_config_dir, default_root_config
from shellconf.schema.builder import load_default_schema

from .mutator import Mutator
from .notifier import ChangeNotifier, ReloadErrorEvent
from .pipeline import ReloadPipeline
from .store import ConfigStore
from .watcher import ReloadWatcher

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType

    from shellconf.core.logging import ShellconfLogger
    from shellconf.schema.model import SchemaNode

    from .notifier import ChangeEvent, Subscription
    from .store import Snapshot

logger: ShellconfLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Tuning knobs of the engine.

    Attributes:
        debounce (float): Debounce window in seconds.
        max_delay (float | None): Cap on how long a stream of events may postpone a
            reload; ``None`` means ten debounce windows.
        reload_timeout (float): Bound for synchronous reloads (``set``/``reset``).
        queue_size (int): Capacity of the watcher's event queue.
        watch_files (bool): Watch the configuration files for external edits.
        create_missing_root (bool): Create an empty root document on start if missing.
    """

    debounce: float = DEBOUNCE_SECONDS
    max_delay: float | None = None
    reload_timeout: float = RELOAD_TIMEOUT_SECONDS
    queue_size: int = EVENT_QUEUE_SIZE
    watch_files: bool = True
    create_missing_root: bool = True


class ConfigEngine:
    """Hot-reloadable configuration engine.

    Args:
        root_path (Path | None): Root configuration document; defaults to
            ``config.toml`` in ``config_dir``.
        config_dir (Path | None): Directory ``@`` imports resolve against; defaults to the
            parent of ``root_path``, else the user configuration directory.
        schema (SchemaNode | None): Root schema node; defaults to the packaged shell
            schema.
        options (EngineOptions | None): Tuning knobs.
    """

    def __init__(
        self,
        root_path: Path | None = None,
        *,
        config_dir: Path | None = None,
        schema: SchemaNode | None = None,
        options: EngineOptions | None = None,
    ) -> None:
        if config_dir is None:
            config_dir = root_path.parent if root_path is not None else default_config_dir()
        if root_path is None:
            root_path = default_root_config(config_dir)
        self.options: EngineOptions = options or EngineOptions()
        self.schema: SchemaNode = schema if schema is not None else load_default_schema()
        self.pipeline = ReloadPipeline(root_path, config_dir, self.schema)
        self.store = ConfigStore()
        self.notifier = ChangeNotifier(self.schema)
        self.watcher = ReloadWatcher(
            self._reload_pass,
            debounce=self.options.debounce,
            max_delay=self.options.max_delay,
            queue_size=self.options.queue_size,
            watch_files=self.options.watch_files,
            extra_match=self.pipeline.watches_secret_file,
            extra_dirs=(self.pipeline.config_dir,),
        )
        self.mutator = Mutator(
            self.store,
            self.pipeline,
            self.watcher.request_reload,
            timeout=self.options.reload_timeout,
        )
        self.last_error: ShellconfError | None = None
        self._started: bool = False

    @property
    def root_path(self) -> Path:
        """The root configuration document."""
        return self.pipeline.root_path

    @property
    def config_dir(self) -> Path:
        """Directory ``@`` imports resolve against."""
        return self.pipeline.config_dir

    # --- lifecycle ---

    def start(self) -> ConfigEngine:
        """Load the configuration, publish the first snapshot and start watching.

        Returns:
            ConfigEngine: ``self``, for chaining.

        Raises:
            EngineStateError: If the engine was already started.
            SourceReadError: If a missing root document cannot be created.
        """
        if self._started:
            raise EngineStateError("engine already started")
        if self.options.create_missing_root:
            ensure_root_config(self.root_path)
        files: frozenset[Path] = self._reload_pass()
        self.watcher.start(files)
        self._started = True
        logger.info(
            "Configuration engine started on %s (version %d)",
            self.root_path,
            self.store.current().version,
        )
        return self

    def close(self) -> None:
        """Stop watching and close every subscription."""
        if not self._started:
            return
        self.watcher.stop(self.options.reload_timeout)
        self.notifier.close()
        self._started = False
        logger.debug("Configuration engine closed")

    def __enter__(self) -> ConfigEngine:
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- reload ---

    def _reload_pass(self) -> frozenset[Path]:
        """Run one pipeline pass and publish or report; return the files to monitor."""
        try:
            candidate: Snapshot = self.pipeline.run()
        except ShellconfError as exc:
            return self._report_failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error in reload pass")
            error = LoadError(f"unexpected error during reload: {exc}")
            error.__cause__ = exc
            return self._report_failure(error)
        self.last_error = None
        return self._publish(candidate).files

    def _report_failure(self, exc: ShellconfError) -> frozenset[Path]:
        self.last_error = exc
        if self.store.has_snapshot:
            kept: int = self.store.current().version
            logger.error("Reload failed, keeping version %d: %s", kept, exc)
        else:
            logger.warning("Configuration failed to load, using schema defaults: %s", exc)
            self._publish(self.pipeline.defaults())
            kept = self.store.current().version
        self.notifier.notify_error(
            ReloadErrorEvent(error=exc, version=kept, files=self.pipeline.files),
        )
        return self.pipeline.files

    def _publish(self, candidate: Snapshot) -> Snapshot:
        previous, published = self.store.publish(candidate)
        self.notifier.notify(previous, published)
        return published

    def reload(self, timeout: float | None = None) -> Snapshot:
        """Force a reload pass and wait for it.

        Returns:
            Snapshot: The current snapshot after the pass (unchanged if the pass failed;
            see ``last_error``).

        Raises:
            EngineStateError: If the engine is not started.
            ReloadTimeoutError: If the pass did not finish in time.
        """
        self.watcher.request_reload(self.options.reload_timeout if timeout is None else timeout)
        return self.store.current()

    # --- reads ---

    def current(self) -> Snapshot:
        """Return the current snapshot."""
        return self.store.current()

    def get(self, path: str = "") -> Any:
        """Return the value at ``path`` as plain Python data."""
        return self.mutator.get(path)

    def provenance(self, path: str) -> Path | None:
        """Return the document owning the leaf at ``path`` (``None`` for defaults)."""
        return self.store.current().provenance(path)

    # --- writes ---

    def set(self, path: str, literal: str) -> Snapshot:
        """Set ``path`` from a TOML literal (see `Mutator.set`)."""
        self._require_started()
        return self.mutator.set(path, literal)

    def set_value(self, path: str, value: Any) -> Snapshot:
        """Set ``path`` to a Python value (see `Mutator.set_value`)."""
        self._require_started()
        return self.mutator.set_value(path, value)

    def reset(self, path: str) -> Snapshot:
        """Reset ``path`` (see `Mutator.reset`)."""
        self._require_started()
        return self.mutator.reset(path)

    # --- subscriptions ---

    def subscribe(
        self,
        prefix: str = "",
        callback: Callable[[ChangeEvent], None] | None = None,
    ) -> Subscription:
        """Subscribe to changes below ``prefix`` from the current version on."""
        since: int = self.store.current().version if self.store.has_snapshot else 0
        return self.notifier.subscribe(prefix, callback, since=since)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Cancel a subscription."""
        self.notifier.unsubscribe(subscription)

    def add_error_listener(self, listener: Callable[[ReloadErrorEvent], None]) -> None:
        """Register a listener for reload failures."""
        self.notifier.add_error_listener(listener)

    def _require_started(self) -> None:
        if not self._started:
            raise EngineStateError("engine is not started")
