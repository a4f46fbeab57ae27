# topmark:header:start
#
#   project      : ShellConf
#   file         : store.py
#   file_relpath : src/shellconf/runtime/store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable configuration snapshots and the store that publishes them.

A [`Snapshot`][shellconf.runtime.store.Snapshot] is a fully validated, fully defaulted
tree plus the documents it was built from. Snapshots are never mutated: a reload builds
a new candidate and [`ConfigStore.publish`][shellconf.runtime.store.ConfigStore.publish]
swaps the reference.

Readers call `current()` without locking and may keep the returned snapshot for as long
as they like; the reference swap is a single attribute assignment. The publish side is
serialized by a lock so versions are strictly increasing.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from shellconf.core.errors import EngineStateError
from shellconf.core.logging import get_logger
from shellconf.dotpath import lookup, lookup_node, resolve_path
from shellconf.merge import MergedLeaf, MergedTable, iter_leaves, thaw

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger
    from shellconf.dotpath import ResolvedPath
    from shellconf.io.types import ConfigSource
    from shellconf.merge import MergedNode
    from shellconf.schema.model import SchemaNode

logger: ShellconfLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One published configuration state.

    Attributes:
        version (int): Monotonic version assigned on publish (``0`` for candidates).
        root (MergedTable): Validated, fully defaulted tree.
        schema (SchemaNode): Root schema node the tree was validated against.
        sources (tuple[ConfigSource, ...]): Documents in resolver order.
        files (frozenset[Path]): Transitive file set of the import graph.
        root_path (Path): The root configuration document.
    """

    version: int
    root: MergedTable
    schema: SchemaNode
    sources: tuple[ConfigSource, ...]
    files: frozenset[Path]
    root_path: Path

    def resolve(self, path: str) -> ResolvedPath:
        """Resolve ``path`` against the snapshot's schema."""
        return resolve_path(self.schema, path)

    def node(self, path: str) -> MergedNode | Any:
        """Return the tree node at ``path`` (the frozen element for index paths).

        Raises:
            PathSyntaxError: If ``path`` is malformed.
            PathNotFoundError: If ``path`` has no schema node.
        """
        return lookup(self.root, self.resolve(path))

    def value(self, path: str = "") -> Any:
        """Return the value at ``path`` as plain Python data (``dict``/``list``/scalars)."""
        return thaw(self.node(path))

    def provenance(self, path: str) -> Path | None:
        """Return the document owning the leaf at ``path``.

        Element paths report the document owning the array. Tables and schema defaults
        have no provenance and return ``None``.
        """
        node: MergedNode = lookup_node(self.root, self.resolve(path))
        return node.provenance if isinstance(node, MergedLeaf) else None

    def source_for(self, path: str) -> ConfigSource | None:
        """Return the document owning the leaf at ``path``, or ``None`` for defaults."""
        owner: Path | None = self.provenance(path)
        if owner is None:
            return None
        for source in self.sources:
            if source.path == owner:
                return source
        return None

    def leaves(self) -> Iterator[tuple[str, MergedLeaf]]:
        """Yield ``(dotted_path, leaf)`` for every leaf in tree order."""
        return iter_leaves(self.root)

    def to_dict(self) -> dict[str, Any]:
        """Return the whole configuration as plain Python data."""
        return thaw(self.root)


class ConfigStore:
    """Holds the current snapshot and publishes new ones."""

    def __init__(self) -> None:
        self._current: Snapshot | None = None
        self._publish_lock = threading.Lock()

    @property
    def has_snapshot(self) -> bool:
        """Whether a snapshot was published."""
        return self._current is not None

    def current(self) -> Snapshot:
        """Return the latest published snapshot.

        Raises:
            EngineStateError: If nothing was published yet.
        """
        snapshot: Snapshot | None = self._current
        if snapshot is None:
            raise EngineStateError("no configuration snapshot has been published yet")
        return snapshot

    def publish(self, candidate: Snapshot) -> tuple[Snapshot | None, Snapshot]:
        """Assign the next version to ``candidate`` and make it current.

        Args:
            candidate (Snapshot): A validated snapshot (its version is ignored).

        Returns:
            tuple[Snapshot | None, Snapshot]: The previous snapshot (``None`` on first
            publish) and the published one.
        """
        with self._publish_lock:
            previous: Snapshot | None = self._current
            version: int = previous.version + 1 if previous is not None else 1
            published: Snapshot = replace(candidate, version=version)
            self._current = published
        logger.info("Published configuration version %d", version)
        return previous, published
