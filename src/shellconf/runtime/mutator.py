# topmark:header:start
#
#   project      : ShellConf
#   file         : mutator.py
#   file_relpath : src/shellconf/runtime/mutator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Dotted-path reads and write-back mutations.

``set`` and ``reset`` never edit a snapshot. They rewrite one key in the document that
owns it and then wait for the reload that picks the change up:

1. resolve the path against the schema and check the new value (kind and constraints);
2. pick the target document: the leaf's provenance, or the root document for a value
   that currently comes from the schema default;
3. rewrite only that key with `tomlkit` (comments, ordering and other keys survive);
4. preflight the whole pipeline with the edited text, so a change that would not load
   is refused before anything is written;
5. write the file atomically and run a synchronous reload bounded by the timeout.

Element paths (``bar.layout.left[0]``) rewrite the owning array as a whole.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from shellconf.core.errors import (
    ConfigValidationError,
    PathNotFoundError,
    PathSyntaxError,
    TypeMismatchError,
    WriteBackError,
)
from shellconf.core.logging import get_logger
from shellconf.dotpath import lookup_node
from shellconf.io.guards import is_array
from shellconf.io.loaders import read_document_text
from shellconf.io.surgery import remove_key, set_key, write_text_atomic
from shellconf.merge import MergedLeaf, MergedTable, iter_leaves, thaw
from shellconf.schema.model import SchemaKind
from shellconf.schema.validator import validate_value

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from shellconf.core.errors import ValidationError
    from shellconf.core.logging import ShellconfLogger
    from shellconf.dotpath import ResolvedPath
    from shellconf.merge import MergedNode

    from .pipeline import ReloadPipeline
    from .store import ConfigStore, Snapshot

logger: ShellconfLogger = get_logger(__name__)

_LITERAL_KEY: str = "v"


def parse_literal(literal: str, kind: SchemaKind | None) -> Any:
    """Parse a command-line literal as a TOML value.

    String and enum values also accept the raw text (``bottom`` instead of
    ``'"bottom"'``); anything that does not parse as a TOML string is taken verbatim.

    Args:
        literal (str): The literal as typed.
        kind (SchemaKind | None): Expected kind; ``None`` when unknown.

    Returns:
        Any: The parsed value (plain Python data).

    Raises:
        ValueError: If the literal is not a single TOML value and the kind does not
            accept raw text.
    """
    textual: bool = kind in (SchemaKind.STRING, SchemaKind.ENUM)
    try:
        doc: dict[str, Any] = tomlkit.parse(f"{_LITERAL_KEY} = {literal}\n").unwrap()
    except TomlkitParseError as exc:
        if textual:
            return literal
        raise ValueError(f"not a TOML value: {literal!r}") from exc
    if set(doc) != {_LITERAL_KEY}:
        if textual:
            return literal
        raise ValueError(f"not a single TOML value: {literal!r}")
    value: Any = doc[_LITERAL_KEY]
    if textual and not isinstance(value, str):
        return literal
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if is_array(value):
        return [_plain(v) for v in value]
    return value


def _raise_first(errors: list[ValidationError]) -> None:
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise ConfigValidationError(errors)


class Mutator:
    """Reads and write-back mutations against the current snapshot.

    Args:
        store (ConfigStore): Source of the current snapshot.
        pipeline (ReloadPipeline): Pipeline used to preflight edits.
        reload (Callable[[float], None]): Runs a synchronous reload bounded by the
            given timeout.
        timeout (float): Reload timeout in seconds.
    """

    def __init__(
        self,
        store: ConfigStore,
        pipeline: ReloadPipeline,
        reload: Callable[[float], None],
        *,
        timeout: float,
    ) -> None:
        self._store = store
        self._pipeline = pipeline
        self._reload = reload
        self.timeout: float = timeout
        self._lock = threading.Lock()

    # --- reads ---

    def get(self, path: str) -> Any:
        """Return the value at ``path`` as plain Python data.

        Raises:
            PathSyntaxError: If ``path`` is malformed.
            PathNotFoundError: If ``path`` has no schema node.
        """
        return self._store.current().value(path)

    # --- writes ---

    def set(self, path: str, literal: str) -> Snapshot:
        """Parse ``literal`` for the kind at ``path`` and write it back.

        Raises:
            TypeMismatchError: If the literal does not parse as the expected kind.
            See [`set_value`][shellconf.runtime.mutator.Mutator.set_value] for the rest.
        """
        snapshot: Snapshot = self._store.current()
        resolved: ResolvedPath = snapshot.resolve(path)
        kind: SchemaKind | None = (
            resolved.node.items if resolved.index is not None else resolved.node.kind
        )
        try:
            value: Any = parse_literal(literal, kind)
        except ValueError as exc:
            expected: str = kind.value if kind is not None else "TOML value"
            raise TypeMismatchError(resolved.text, expected, "unparsable literal") from exc
        return self.set_value(path, value)

    def set_value(self, path: str, value: Any) -> Snapshot:
        """Validate ``value`` for ``path``, write it to the owning document and reload.

        Args:
            path (str): Dotted path of a leaf or array element.
            value (Any): Plain Python value.

        Returns:
            Snapshot: The snapshot published by the reload.

        Raises:
            PathSyntaxError: If ``path`` is malformed.
            PathNotFoundError: If ``path`` does not resolve (or the index is out of range).
            TypeMismatchError: If the value has the wrong kind, or ``path`` is a table.
            ConstraintViolationError: If the value violates a constraint.
            ConfigValidationError: If several violations were found, or the edited
                configuration as a whole does not validate.
            LoadError: If the edited configuration does not load.
            WriteBackError: If the document cannot be rewritten.
            ReloadTimeoutError: If the reload did not finish in time.
        """
        with self._lock:
            snapshot: Snapshot = self._store.current()
            resolved: ResolvedPath = snapshot.resolve(path)
            if resolved.node.kind is SchemaKind.TABLE:
                raise TypeMismatchError(resolved.text, "leaf", "table")

            leaf: MergedNode = lookup_node(snapshot.root, resolved)
            if not isinstance(leaf, MergedLeaf):
                raise PathNotFoundError(resolved.text)

            new_value: Any = _plain(value)
            if resolved.index is not None:
                items: list[Any] = thaw(leaf.value)
                if resolved.index >= len(items):
                    raise PathNotFoundError(
                        resolved.text,
                        f"index out of range (length {len(items)})",
                    )
                items[resolved.index] = new_value
                new_value = items
            _raise_first(validate_value(resolved.node, new_value, resolved.key_path))

            target: Path = leaf.provenance or snapshot.root_path
            text: str = read_document_text(target)
            try:
                edited: str = set_key(text, resolved.keys, new_value)
            except (RuntimeError, TypeError) as exc:
                raise WriteBackError(target, str(exc)) from exc
            logger.info("Setting %s in %s", resolved.text, target)
            return self._commit({target: edited})

    def reset(self, path: str) -> Snapshot:
        """Remove the value(s) at ``path`` from the documents that define them and reload.

        A leaf that currently comes from its schema default is left alone (no write, no
        reload). For a table, every leaf below it is reset.

        Returns:
            Snapshot: The snapshot published by the reload (the current one on no-op).

        Raises:
            PathSyntaxError: If ``path`` is malformed or designates an array element.
            PathNotFoundError: If ``path`` has no schema node.
            LoadError: If the edited configuration does not load.
            ConfigValidationError: If the edited configuration does not validate.
            WriteBackError: If a document cannot be rewritten.
            ReloadTimeoutError: If the reload did not finish in time.
        """
        with self._lock:
            snapshot: Snapshot = self._store.current()
            resolved: ResolvedPath = snapshot.resolve(path)
            if resolved.index is not None:
                raise PathSyntaxError(resolved.text, "array elements cannot be reset")

            node: MergedNode = lookup_node(snapshot.root, resolved)
            owned: dict[Path, list[tuple[str, ...]]] = {}
            if isinstance(node, MergedTable):
                prefix: tuple[str, ...] = resolved.keys
                for leaf_path, leaf in iter_leaves(node):
                    if leaf.provenance is not None:
                        keys: tuple[str, ...] = prefix + tuple(leaf_path.split("."))
                        owned.setdefault(leaf.provenance, []).append(keys)
            elif node.provenance is not None:
                owned[node.provenance] = [resolved.keys]

            if not owned:
                logger.info("Nothing to reset at %s (schema default)", resolved.text or "<root>")
                return snapshot

            edits: dict[Path, str] = {}
            for target, key_paths in owned.items():
                text: str = read_document_text(target)
                for keys in key_paths:
                    try:
                        text, _ = remove_key(text, keys)
                    except (RuntimeError, TypeError) as exc:
                        raise WriteBackError(target, str(exc)) from exc
                edits[target] = text
            logger.info("Resetting %s in %s", resolved.text or "<root>", ", ".join(map(str, edits)))
            return self._commit(edits)

    def _commit(self, edits: dict[Path, str]) -> Snapshot:
        self._pipeline.run(overrides=edits, track_files=False)
        for target, text in edits.items():
            write_text_atomic(target, text)
        self._reload(self.timeout)
        return self._store.current()

