# topmark:header:start
#
#   project      : ShellConf
#   file         : watcher.py
#   file_relpath : src/shellconf/runtime/watcher.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Debounced reload scheduling on a single dedicated thread.

State machine:

```text
IDLE --event--> DEBOUNCING --window elapsed--> RELOADING --> IDLE
                  ^   |  (each event restarts the window,   |
                  |   |   up to max_delay in total)         |
                  |   +-- reload request: skip the window   |
                  +------------- pending events ------------+
```

Events and synchronous reload requests travel through one bounded `queue.Queue`
consumed by the ``shellconf-reload`` thread, so exactly one reload runs at a time.
Events that arrive while a reload runs stay queued; once the pass ends they set the
*pending* flag and the watcher debounces once more, coalescing all of them into a single
follow-up pass.

The filesystem side is a `watchdog` observer watching the parent directories of the
monitored file set. Only events whose path (or move destination) is monitored are
submitted. Tests drive the same queue with synthetic
[`FileEvent`][shellconf.runtime.watcher.FileEvent]s through
[`submit`][shellconf.runtime.watcher.ReloadWatcher.submit].
"""

from __future__ import annotations

import os
import queue
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from shellconf.constants import DEBOUNCE_MAX_FACTOR, DEBOUNCE_SECONDS, EVENT_QUEUE_SIZE
from shellconf.core.errors import EngineStateError, ReloadTimeoutError
from shellconf.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from watchdog.observers.api import BaseObserver, ObservedWatch

    from shellconf.core.logging import ShellconfLogger

logger: ShellconfLogger = get_logger(__name__)


class WatcherState(str, Enum):
    """State of the reload watcher."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RELOADING = "reloading"


class FileEventKind(str, Enum):
    """Kind of a filesystem change."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


_KIND_BY_EVENT_TYPE: dict[str, FileEventKind] = {
    EVENT_TYPE_CREATED: FileEventKind.CREATED,
    EVENT_TYPE_MODIFIED: FileEventKind.MODIFIED,
    EVENT_TYPE_DELETED: FileEventKind.DELETED,
    EVENT_TYPE_MOVED: FileEventKind.MOVED,
}


@dataclass(frozen=True, slots=True)
class FileEvent:
    """A change to one file.

    Attributes:
        path (Path): Absolute path of the changed file.
        kind (FileEventKind): What happened to it.
    """

    path: Path
    kind: FileEventKind = FileEventKind.MODIFIED


@dataclass(eq=False)
class _ReloadRequest:
    done: threading.Event = field(default_factory=threading.Event)
    error: BaseException | None = None


_STOP: Any = object()


class _WatchdogHandler(FileSystemEventHandler):
    """Translate watchdog events for monitored files into `FileEvent`s."""

    def __init__(self, watcher: ReloadWatcher) -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        kind: FileEventKind | None = _KIND_BY_EVENT_TYPE.get(event.event_type)
        if kind is None:
            return
        candidates: list[Any] = [event.src_path]
        if kind is FileEventKind.MOVED:
            candidates.append(getattr(event, "dest_path", ""))
        for raw in candidates:
            if not raw:
                continue
            path: Path = Path(os.fsdecode(raw)).absolute()
            if self._watcher.is_monitored(path):
                logger.trace("watchdog: %s %s", kind.value, path)
                self._watcher.submit(FileEvent(path, kind))
                return


class ReloadWatcher:
    """Schedule reload passes from file events and explicit requests.

    Args:
        reload (Callable[[], frozenset[Path]]): Runs one reload pass and returns the
            file set to monitor afterwards. Called only on the reload thread.
        debounce (float): Debounce window in seconds.
        max_delay (float | None): Longest a stream of events may postpone a pass;
            defaults to ``DEBOUNCE_MAX_FACTOR`` debounce windows.
        queue_size (int): Capacity of the event queue.
        watch_files (bool): Start a `watchdog` observer for the monitored files.
        extra_match (Callable[[Path], bool] | None): Also monitors files this predicate
            accepts, whether or not they exist yet.
        extra_dirs (Iterable[Path]): Directories watched in addition to the parents of
            the monitored files (where ``extra_match`` files live).
    """

    def __init__(
        self,
        reload: Callable[[], frozenset[Path]],
        *,
        debounce: float = DEBOUNCE_SECONDS,
        max_delay: float | None = None,
        queue_size: int = EVENT_QUEUE_SIZE,
        watch_files: bool = True,
        extra_match: Callable[[Path], bool] | None = None,
        extra_dirs: Iterable[Path] = (),
    ) -> None:
        self._reload = reload
        self._extra_match = extra_match
        self._extra_dirs: frozenset[Path] = frozenset(extra_dirs)
        self.debounce: float = debounce
        self.max_delay: float = (
            max_delay if max_delay is not None else debounce * DEBOUNCE_MAX_FACTOR
        )
        self.watch_files: bool = watch_files
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=queue_size)
        self._files: frozenset[Path] = frozenset()
        self._thread: threading.Thread | None = None
        self._observer: BaseObserver | None = None
        self._handler = _WatchdogHandler(self)
        self._watches: dict[Path, ObservedWatch] = {}
        self._stopping: bool = False
        self.state: WatcherState = WatcherState.IDLE
        self.pending: bool = False
        self.passes: int = 0

    # --- lifecycle ---

    @property
    def running(self) -> bool:
        """Whether the reload thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def files(self) -> frozenset[Path]:
        """The monitored file set."""
        return self._files

    def start(self, files: Iterable[Path] = ()) -> None:
        """Start the reload thread (and the observer when ``watch_files`` is set).

        Args:
            files (Iterable[Path]): Initial monitored file set.

        Raises:
            EngineStateError: If the watcher is already running.
        """
        if self.running:
            raise EngineStateError("reload watcher is already running")
        self._stopping = False
        if self.watch_files:
            self._observer = Observer()
            self._observer.daemon = True
            self._observer.start()
        self._set_files(frozenset(files))
        self._thread = threading.Thread(
            target=self._run,
            name="shellconf-reload",
            daemon=True,
        )
        self._thread.start()
        logger.debug(
            "Reload watcher started (debounce %.0f ms, watching files: %s)",
            self.debounce * 1000,
            self.watch_files,
        )

    def stop(self, timeout: float | None = None) -> None:
        """Stop the observer and the reload thread; an in-flight pass runs to completion."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout)
            self._observer = None
            self._watches.clear()
        thread: threading.Thread | None = self._thread
        if thread is not None and thread.is_alive():
            self._queue.put(_STOP)
            thread.join(timeout)
        self._thread = None
        logger.debug("Reload watcher stopped")

    # --- inputs ---

    def is_monitored(self, path: Path) -> bool:
        """Whether ``path`` belongs to the monitored file set."""
        if path in self._files:
            return True
        return self._extra_match is not None and self._extra_match(path)

    def submit(self, event: FileEvent) -> bool:
        """Queue a file event.

        Returns:
            bool: ``False`` if the queue is full and the event was dropped; a full queue
            already guarantees a follow-up pass.
        """
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.debug("Event queue full, dropping %s", event)
            return False
        return True

    def request_reload(self, timeout: float) -> None:
        """Run a reload pass now (no debounce) and wait for it to finish.

        Args:
            timeout (float): Seconds to wait for the pass.

        Raises:
            EngineStateError: If the watcher is not running, or when called from the
                reload thread itself (which would deadlock).
            ReloadTimeoutError: If the pass did not finish within ``timeout``.
        """
        if not self.running:
            raise EngineStateError("reload watcher is not running")
        if threading.current_thread() is self._thread:
            raise EngineStateError("cannot wait for a reload from the reload thread")
        deadline: float = time.monotonic() + timeout
        request = _ReloadRequest()
        try:
            self._queue.put(request, timeout=timeout)
        except queue.Full as exc:
            raise ReloadTimeoutError(timeout) from exc
        if not request.done.wait(max(0.0, deadline - time.monotonic())):
            raise ReloadTimeoutError(timeout)
        if request.error is not None:
            raise request.error

    # --- reload thread ---

    def _run(self) -> None:
        while not self._stopping:
            item: Any = self._queue.get()
            if item is _STOP:
                break
            requests: list[_ReloadRequest] = []
            if isinstance(item, _ReloadRequest):
                requests.append(item)
            elif self._is_relevant(item):
                self._debounce(requests)
            else:
                continue

            while not self._stopping:
                self._reload_once(requests)
                requests = []
                self.pending = self._drain(requests)
                if requests:
                    continue
                if not self.pending:
                    break
                logger.debug("Changes arrived during reload; debouncing again")
                self._debounce(requests)
            self.pending = False
            self.state = WatcherState.IDLE

        self.state = WatcherState.IDLE

    def _is_relevant(self, item: Any) -> bool:
        return isinstance(item, FileEvent) and self.is_monitored(item.path)

    def _debounce(self, requests: list[_ReloadRequest]) -> None:
        self.state = WatcherState.DEBOUNCING
        started: float = time.monotonic()
        cap: float = started + max(self.max_delay, self.debounce)
        deadline: float = started + self.debounce
        while True:
            remaining: float = deadline - time.monotonic()
            if remaining <= 0:
                return
            try:
                item: Any = self._queue.get(timeout=remaining)
            except queue.Empty:
                return
            if item is _STOP:
                self._stopping = True
                return
            if isinstance(item, _ReloadRequest):
                requests.append(item)
                return
            if self._is_relevant(item):
                deadline = min(time.monotonic() + self.debounce, cap)

    def _drain(self, requests: list[_ReloadRequest]) -> bool:
        pending: bool = False
        while True:
            try:
                item: Any = self._queue.get_nowait()
            except queue.Empty:
                return pending
            if item is _STOP:
                self._stopping = True
            elif isinstance(item, _ReloadRequest):
                requests.append(item)
            elif self._is_relevant(item):
                pending = True

    def _reload_once(self, requests: list[_ReloadRequest]) -> None:
        self.state = WatcherState.RELOADING
        error: BaseException | None = None
        try:
            self._set_files(self._reload())
        except Exception as exc:
            logger.exception("Reload pass crashed")
            error = exc
        finally:
            self.passes += 1
            for request in requests:
                request.error = error
                request.done.set()

    # --- observer ---

    def _set_files(self, files: frozenset[Path]) -> None:
        self._files = files
        if self._observer is None:
            return
        wanted: set[Path] = {p.parent for p in files} | self._extra_dirs
        for directory in list(self._watches):
            if directory not in wanted:
                self._observer.unschedule(self._watches.pop(directory))
        for directory in sorted(wanted - set(self._watches)):
            if not directory.is_dir():
                logger.debug("Not watching missing directory %s", directory)
                continue
            self._watches[directory] = self._observer.schedule(
                self._handler,
                str(directory),
                recursive=False,
            )
        logger.trace("Watching %d file(s) in %d directories", len(files), len(self._watches))
