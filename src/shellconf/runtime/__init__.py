# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/runtime/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Runtime side of ShellConf: snapshots, reloads, notifications and mutations.

Submodules:
    - [`store`][shellconf.runtime.store]: `Snapshot` and `ConfigStore`.
    - [`notifier`][shellconf.runtime.notifier]: subscriptions and change events.
    - [`pipeline`][shellconf.runtime.pipeline]: Load -> Resolve -> Merge -> Validate.
    - [`watcher`][shellconf.runtime.watcher]: debounced reload thread and file watching.
    - [`mutator`][shellconf.runtime.mutator]: ``get``/``set``/``reset`` write-back.
    - [`engine`][shellconf.runtime.engine]: the `ConfigEngine` facade.
"""

from __future__ import annotations

from shellconf.runtime.engine import ConfigEngine, EngineOptions
from shellconf.runtime.notifier import (
    ChangeEvent,
    ChangeNotifier,
    ReloadErrorEvent,
    Subscription,
)
from shellconf.runtime.pipeline import ReloadPipeline
from shellconf.runtime.store import ConfigStore, Snapshot
from shellconf.runtime.watcher import FileEvent, FileEventKind, ReloadWatcher, WatcherState

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "ConfigEngine",
    "ConfigStore",
    "EngineOptions",
    "FileEvent",
    "FileEventKind",
    "ReloadErrorEvent",
    "ReloadPipeline",
    "ReloadWatcher",
    "Snapshot",
    "Subscription",
    "WatcherState",
]
