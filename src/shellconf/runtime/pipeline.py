# topmark:header:start
#
#   project      : ShellConf
#   file         : pipeline.py
#   file_relpath : src/shellconf/runtime/pipeline.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The reload pipeline: Load -> Resolve -> Merge -> Secrets -> Validate.

[`ReloadPipeline.run`][shellconf.runtime.pipeline.ReloadPipeline.run] turns the files on
disk (optionally with some documents replaced by pending edits) into a candidate
[`Snapshot`][shellconf.runtime.store.Snapshot]. It never publishes anything; the engine
does that on the reload thread, and the mutator uses the same pipeline to preflight an
edit before writing it.

Each pass also re-reads the secret files of the configuration directory (see
[`shellconf.secrets`][shellconf.secrets]) and adds them to the file set, so the watcher
reloads when a secret changes.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from shellconf.core.logging import get_logger
from shellconf.merge import EMPTY_TABLE, merge
from shellconf.resolver import ImportResolver
from shellconf.schema.validator import validate
from shellconf.secrets import is_env_file, load_env_files, resolve_secrets

from .store import Snapshot

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from shellconf.core.logging import ShellconfLogger
    from shellconf.merge import MergedTable
    from shellconf.resolver import OrderedDocuments
    from shellconf.schema.model import SchemaNode
    from shellconf.secrets import SecretEnv

logger: ShellconfLogger = get_logger(__name__)


class ReloadPipeline:
    """Build candidate snapshots from the configuration files.

    Args:
        root_path (Path): The root configuration document.
        config_dir (Path): Directory ``@`` imports resolve against.
        schema (SchemaNode): Root schema node.
    """

    def __init__(self, root_path: Path, config_dir: Path, schema: SchemaNode) -> None:
        self.root_path: Path = root_path.resolve()
        self.config_dir: Path = config_dir.resolve()
        self.schema: SchemaNode = schema
        self.files: frozenset[Path] = frozenset({self.root_path})

    def run(
        self,
        overrides: Mapping[Path, str] | None = None,
        *,
        track_files: bool = True,
    ) -> Snapshot:
        """Run one pass and return a candidate snapshot (version ``0``).

        With ``track_files``, ``files`` is updated even when the pass fails, so the caller
        can keep watching the files that would fix the failure.

        Args:
            overrides (Mapping[Path, str] | None): Document texts to use instead of the
                on-disk content.
            track_files (bool): Record the pass's file set in ``files``; preflight
                passes leave it alone.

        Returns:
            Snapshot: The candidate.

        Raises:
            LoadError: If loading or import resolution fails.
            ConfigValidationError: If the merged tree violates the schema.
        """
        started: float = time.perf_counter()
        env: SecretEnv = load_env_files(self.config_dir)
        resolver = ImportResolver(self.config_dir, overrides=overrides)
        try:
            documents: OrderedDocuments = resolver.load(self.root_path)
        finally:
            if track_files:
                self.files = resolver.files | env.files | {self.root_path}
        tree: MergedTable = validate(resolve_secrets(merge(documents), env), self.schema)
        logger.debug(
            "Pipeline pass over %d document(s) took %.1f ms",
            len(documents),
            (time.perf_counter() - started) * 1000,
        )
        return Snapshot(
            version=0,
            root=tree,
            schema=self.schema,
            sources=documents,
            files=resolver.files | env.files | {self.root_path},
            root_path=self.root_path,
        )

    def defaults(self) -> Snapshot:
        """Return a candidate built from schema defaults only (no documents)."""
        return Snapshot(
            version=0,
            root=validate(EMPTY_TABLE, self.schema),
            schema=self.schema,
            sources=(),
            files=self.files,
            root_path=self.root_path,
        )

    def watches_secret_file(self, path: Path) -> bool:
        """Whether ``path`` is a secret file of the configuration directory.

        Such files matter even before they exist, so the watcher asks for them by name
        rather than through ``files``.
        """
        return path.parent == self.config_dir and is_env_file(path)
