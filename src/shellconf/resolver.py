# topmark:header:start
#
#   project      : ShellConf
#   file         : resolver.py
#   file_relpath : src/shellconf/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Import graph resolution.

A configuration is a tree of TOML documents linked by their ``imports`` directive.
[`ImportResolver`][shellconf.resolver.ImportResolver] walks that graph depth-first
and returns the documents in *merge order*:

    for each document: its imports (recursively, in declaration order), then itself

so a document's own keys always come after (and therefore outrank) everything it
imports, at any nesting depth.

Cycle detection:
    The resolver keeps the current recursion stack of canonical paths. Reaching a path
    that is already on the stack raises
    [`ImportCycleError`][shellconf.core.errors.ImportCycleError] with the full chain,
    e.g. ``[a.toml, b.toml, a.toml]``. A document imported from two different branches
    (a "diamond") is not a cycle: it is parsed once and appears at each import site.

Watched files:
    ``ImportResolver.files`` records every path the last pass touched, including a
    missing import, so the reload watcher also reacts when that file appears.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shellconf.core.errors import ImportCycleError, ImportNotFoundError
from shellconf.core.logging import get_logger
from shellconf.io.loaders import load_document
from shellconf.io.paths import resolve_import

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger
    from shellconf.io.types import ConfigSource

logger: ShellconfLogger = get_logger(__name__)

OrderedDocuments = tuple["ConfigSource", ...]


class ImportResolver:
    """Load a root document and everything it transitively imports.

    Args:
        config_dir (Path): Configuration root directory; ``@``-prefixed import entries
            resolve against it.
        overrides (Mapping[Path, str] | None): Document texts to use instead of the
            on-disk content, keyed by canonical path.
    """

    def __init__(
        self,
        config_dir: Path,
        *,
        overrides: Mapping[Path, str] | None = None,
    ) -> None:
        self.config_dir: Path = config_dir.resolve()
        self.overrides: Mapping[Path, str] = overrides or {}
        self.files: frozenset[Path] = frozenset()
        self._stack: list[Path] = []
        self._cache: dict[Path, ConfigSource] = {}
        self._seen: set[Path] = set()

    def load(self, root_path: Path) -> OrderedDocuments:
        """Resolve ``root_path`` into an ordered tuple of documents.

        Args:
            root_path (Path): The root configuration document.

        Returns:
            OrderedDocuments: Documents in merge order (imports first, root last).

        Raises:
            ImportCycleError: If the import graph has a cycle.
            ImportNotFoundError: If an imported file does not exist.
            ParseError: If a document is not valid TOML.
            SourceReadError: If a document cannot be read.
        """
        self._stack = []
        self._cache = {}
        self._seen = set()
        ordered: list[ConfigSource] = []
        try:
            self._visit(root_path.resolve(), ordered)
        finally:
            self.files = frozenset(self._seen)
        logger.debug(
            "Resolved %s into %d document(s): %s",
            root_path,
            len(ordered),
            ", ".join(src.name for src in ordered),
        )
        return tuple(ordered)

    def _visit(self, path: Path, ordered: list[ConfigSource]) -> None:
        if path in self._stack:
            chain: list[Path] = [*self._stack[self._stack.index(path) :], path]
            raise ImportCycleError(chain)

        self._seen.add(path)
        self._stack.append(path)
        try:
            source: ConfigSource = self._load_cached(path)
            for entry in source.imports:
                target: Path = resolve_import(entry, path, self.config_dir)
                if target not in self.overrides and not target.is_file():
                    self._seen.add(target)
                    raise ImportNotFoundError(path, target)
                self._visit(target, ordered)
            ordered.append(source)
        finally:
            self._stack.pop()

    def _load_cached(self, path: Path) -> ConfigSource:
        cached: ConfigSource | None = self._cache.get(path)
        if cached is None:
            cached = load_document(path, text=self.overrides.get(path))
            self._cache[path] = cached
        return cached