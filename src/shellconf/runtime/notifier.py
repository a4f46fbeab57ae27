# topmark:header:start
#
#   project      : ShellConf
#   file         : notifier.py
#   file_relpath : src/shellconf/runtime/notifier.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-prefix change notification.

Consumers subscribe to a path prefix and receive a
[`ChangeEvent`][shellconf.runtime.notifier.ChangeEvent] whenever a publish changes the
subtree at that prefix. A [`Subscription`][shellconf.runtime.notifier.Subscription] is
an iterable stream of events and may additionally carry a callback invoked on the reload
thread.

Ordering:
    Events of one subscription are delivered with non-decreasing versions; an event older
    than the last one delivered is dropped.

Failures:
    Callback exceptions are logged and swallowed so one faulty subscriber cannot break
    another or the reload thread. Reload failures go to error listeners as
    [`ReloadErrorEvent`][shellconf.runtime.notifier.ReloadErrorEvent].
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shellconf.core.errors import PathNotFoundError
from shellconf.core.logging import get_logger
from shellconf.dotpath import lookup, resolve_path
from shellconf.merge import thaw

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from shellconf.core.errors import ShellconfError
    from shellconf.core.logging import ShellconfLogger
    from shellconf.dotpath import ResolvedPath
    from shellconf.schema.model import SchemaNode

    from .store import Snapshot

logger: ShellconfLogger = get_logger(__name__)

_MISSING: Any = object()
_CLOSED: Any = object()


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """The subtree at ``path`` changed in snapshot ``version``.

    Attributes:
        version (int): Version of the snapshot that introduced the change.
        path (str): The subscription prefix.
        value (Any): New subtree as plain Python data (``None`` if it no longer exists).
    """

    version: int
    path: str
    value: Any


@dataclass(frozen=True, slots=True)
class ReloadErrorEvent:
    """A reload pass failed; the snapshot with ``version`` stays current.

    Attributes:
        error (ShellconfError): The load or validation error.
        version (int): Version of the snapshot kept current (``0`` if none).
        files (frozenset[Path]): Files of the failed pass.
    """

    error: ShellconfError
    version: int
    files: frozenset[Path] = frozenset()


class Subscription:
    """A stream of change events for one path prefix.

    Iterate over a subscription to block for events until it is unsubscribed, or poll
    with [`get`][shellconf.runtime.notifier.Subscription.get].
    """

    def __init__(
        self,
        prefix: ResolvedPath,
        *,
        since: int = 0,
        callback: Callable[[ChangeEvent], None] | None = None,
    ) -> None:
        self._prefix: ResolvedPath = prefix
        self._callback = callback
        self._events: queue.Queue[Any] = queue.Queue()
        self._lock = threading.Lock()
        self.last_version: int = since
        self.active: bool = True

    @property
    def prefix(self) -> str:
        """Canonical text of the subscribed prefix (``""`` for the root)."""
        return self._prefix.text

    @property
    def resolved(self) -> ResolvedPath:
        """The subscribed prefix resolved against the schema."""
        return self._prefix

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """Return the next event.

        Args:
            timeout (float | None): Seconds to wait; ``None`` blocks indefinitely.

        Returns:
            ChangeEvent | None: The event, or ``None`` once the subscription is closed and
            drained.

        Raises:
            queue.Empty: If no event arrived within ``timeout``.
        """
        item: Any = self._events.get(timeout=timeout)
        if item is _CLOSED:
            # Keep the marker for other consumers of the same stream.
            self._events.put(_CLOSED)
            return None
        return item

    def pending(self) -> list[ChangeEvent]:
        """Return every queued event without blocking."""
        out: list[ChangeEvent] = []
        while True:
            try:
                item: Any = self._events.get_nowait()
            except queue.Empty:
                break
            if item is _CLOSED:
                self._events.put(_CLOSED)
                break
            out.append(item)
        return out

    def __iter__(self) -> Iterator[ChangeEvent]:
        while True:
            event: ChangeEvent | None = self.get()
            if event is None:
                return
            yield event

    def deliver(self, event: ChangeEvent) -> bool:
        """Queue ``event`` and run the callback; return ``False`` if it was dropped."""
        with self._lock:
            if not self.active or event.version < self.last_version:
                logger.debug(
                    "Dropping event v%d for %r (last seen v%d)",
                    event.version,
                    self.prefix,
                    self.last_version,
                )
                return False
            self.last_version = event.version
            self._events.put(event)
        if self._callback is not None:
            try:
                self._callback(event)
            except Exception:
                logger.exception("Change callback for %r failed", self.prefix or "<root>")
        return True

    def close(self) -> None:
        """Stop delivery and wake blocked consumers."""
        with self._lock:
            if not self.active:
                return
            self.active = False
        self._events.put(_CLOSED)

    def __repr__(self) -> str:
        return f"Subscription(prefix={self.prefix!r}, last_version={self.last_version})"


def _subtree(snapshot: Snapshot | None, prefix: ResolvedPath) -> Any:
    if snapshot is None:
        return _MISSING
    try:
        return thaw(lookup(snapshot.root, prefix))
    except PathNotFoundError:
        return _MISSING


class ChangeNotifier:
    """Fans out per-prefix diffs of consecutive snapshots to subscribers."""

    def __init__(self, schema: SchemaNode) -> None:
        self._schema: SchemaNode = schema
        self._subscriptions: list[Subscription] = []
        self._error_listeners: list[Callable[[ReloadErrorEvent], None]] = []
        self._lock = threading.Lock()

    def subscribe(
        self,
        prefix: str = "",
        callback: Callable[[ChangeEvent], None] | None = None,
        *,
        since: int = 0,
    ) -> Subscription:
        """Subscribe to changes below ``prefix``.

        Args:
            prefix (str): Dotted path prefix; ``""`` watches everything.
            callback (Callable[[ChangeEvent], None] | None): Optional callback invoked on
                the reload thread for each event.
            since (int): Last version already seen by the caller.

        Returns:
            Subscription: The new subscription.

        Raises:
            PathSyntaxError: If ``prefix`` is malformed.
            PathNotFoundError: If ``prefix`` has no schema node.
        """
        subscription = Subscription(
            resolve_path(self._schema, prefix),
            since=since,
            callback=callback,
        )
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Subscribed to %r", subscription.prefix or "<root>")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove ``subscription`` and close its stream; unknown subscriptions are ignored."""
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        subscription.close()

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        """Active subscriptions."""
        with self._lock:
            return tuple(self._subscriptions)

    def add_error_listener(self, listener: Callable[[ReloadErrorEvent], None]) -> None:
        """Register a listener for reload failures."""
        with self._lock:
            self._error_listeners.append(listener)

    def remove_error_listener(self, listener: Callable[[ReloadErrorEvent], None]) -> None:
        """Remove a listener registered with `add_error_listener`."""
        with self._lock:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

    def notify(self, previous: Snapshot | None, current: Snapshot) -> int:
        """Deliver change events for the transition ``previous`` -> ``current``.

        Returns:
            int: Number of events delivered.
        """
        delivered: int = 0
        for subscription in self.subscriptions:
            before: Any = _subtree(previous, subscription.resolved)
            after: Any = _subtree(current, subscription.resolved)
            if before == after:
                continue
            event = ChangeEvent(
                version=current.version,
                path=subscription.prefix,
                value=None if after is _MISSING else after,
            )
            if subscription.deliver(event):
                delivered += 1
        logger.debug("Version %d: %d change event(s) delivered", current.version, delivered)
        return delivered

    def notify_error(self, event: ReloadErrorEvent) -> None:
        """Deliver a reload failure to every error listener."""
        with self._lock:
            listeners = tuple(self._error_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Reload error listener failed")

    def close(self) -> None:
        """Close every subscription."""
        with self._lock:
            subscriptions = tuple(self._subscriptions)
            self._subscriptions.clear()
        for subscription in subscriptions:
            subscription.close()
