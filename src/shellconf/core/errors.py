# topmark:header:start
#
#   project      : ShellConf
#   file         : errors.py
#   file_relpath : src/shellconf/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Error taxonomy for the ShellConf engine.

Every error raised by the loader, resolver, validator, mutator and reload machinery
derives from [`ShellconfError`][shellconf.core.errors.ShellconfError] and carries the
structured fields callers need (file, path, reason) in addition to a readable message.

Sections:
    * Load errors: parsing and import resolution (`LoadError` and subclasses).
    * Validation errors: per-path schema violations (`ValidationError` and subclasses),
      plus the aggregate `ConfigValidationError` that carries every violation of a pass.
    * Path errors: dotted-path grammar and schema lookup failures.
    * Mutation/runtime errors: write-back, reload timeout, schema definition and engine
      lifecycle problems.

These classes are deliberately free of Click: the CLI maps them onto exit codes in
[`shellconf.cli.errors`][shellconf.cli.errors].
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path


class ShellconfError(Exception):
    """Base class for all ShellConf errors."""


# --- Load errors ---


class LoadError(ShellconfError):
    """Base class for errors raised while loading and resolving documents."""


class ParseError(LoadError):
    """A configuration document is not valid TOML (or has a malformed directive)."""

    def __init__(self, file: Path, location: tuple[int, int] | None, message: str) -> None:
        self.file = file
        self.location = location
        self.message = message
        where: str = f"{file}:{location[0]}:{location[1]}" if location else str(file)
        super().__init__(f"{where}: {message}")


class SourceReadError(LoadError):
    """A configuration document exists in the import graph but cannot be read."""

    def __init__(self, file: Path, reason: str) -> None:
        self.file = file
        self.reason = reason
        super().__init__(f"cannot read {file}: {reason}")


class ImportCycleError(LoadError):
    """The import graph contains a cycle; ``chain`` starts and ends with the same file."""

    def __init__(self, chain: Sequence[Path]) -> None:
        self.chain: tuple[Path, ...] = tuple(chain)
        super().__init__(
            "circular import detected: " + " -> ".join(p.name for p in self.chain),
        )


class ImportNotFoundError(LoadError):
    """An ``imports`` entry points to a file that does not exist."""

    def __init__(self, importer: Path, missing: Path) -> None:
        self.importer = importer
        self.missing = missing
        super().__init__(f"{importer}: imported file not found: {missing}")


# --- Validation errors ---


class ValidationError(ShellconfError):
    """Base class for a single schema violation at a dotted path."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path or '<root>'}: {message}")


class UnknownKeyError(ValidationError):
    """A key is present in the configuration but has no schema node."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "unknown key")


class TypeMismatchError(ValidationError):
    """A value does not have the kind declared by its schema node."""

    def __init__(self, path: str, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(path, f"expected {expected}, found {found}")


class ConstraintViolationError(ValidationError):
    """A value has the right kind but violates a declared constraint."""

    def __init__(self, path: str, constraint: str, value: object) -> None:
        self.constraint = constraint
        self.value = value
        super().__init__(path, f"value {value!r} violates constraint: {constraint}")


class ConfigValidationError(ShellconfError):
    """Aggregate of every violation found in one validation pass."""

    def __init__(self, errors: Iterable[ValidationError]) -> None:
        self.errors: tuple[ValidationError, ...] = tuple(errors)
        lines: list[str] = [str(e) for e in self.errors]
        super().__init__(
            f"{len(self.errors)} validation error(s):\n  " + "\n  ".join(lines),
        )


# --- Path errors ---


class PathError(ShellconfError):
    """Base class for dotted-path errors."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class PathSyntaxError(PathError):
    """The dotted path does not follow the path grammar."""

    def __init__(self, path: str, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"invalid path {path!r}: {reason}")


class PathNotFoundError(PathError):
    """The dotted path does not resolve to a schema node (or an existing array element)."""

    def __init__(self, path: str, detail: str | None = None) -> None:
        msg: str = f"not found: {path!r}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(path, msg)


# --- Mutation and runtime errors ---


class WriteBackError(ShellconfError):
    """A ``set``/``reset`` could not rewrite its owning document."""

    def __init__(self, file: Path, reason: str) -> None:
        self.file = file
        self.reason = reason
        super().__init__(f"cannot write {file}: {reason}")


class ReloadTimeoutError(ShellconfError):
    """A synchronous reload did not complete within the allotted time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"reload did not complete within {timeout:g}s")


class SchemaDefinitionError(ShellconfError):
    """The static schema description itself is malformed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"invalid schema entry {path!r}: {reason}")


class EngineStateError(ShellconfError):
    """An engine operation was called in the wrong lifecycle state."""
