# topmark:header:start
#
#   project      : ShellConf
#   file         : cli_types.py
#   file_relpath : src/shellconf/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Custom Click parameter types for the ShellConf CLI.

- `EnumChoiceParam`: case-insensitive conversion of a string to an `Enum` member.
- `DottedPathParam`: a configuration path, checked against the path grammar, with
  tab completion from the schema.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Generic, NoReturn, Protocol, TypeVar, cast

import click

from shellconf.core.errors import PathSyntaxError
from shellconf.dotpath import format_path, parse_path

if TYPE_CHECKING:
    from collections.abc import Iterable

    from click.shell_completion import CompletionItem as ClickCompletionItem

    class ParamTypeBase(Protocol):
        """Typed base to avoid subclassing Any when Click lacks stubs."""

        name: str

else:
    ParamTypeBase = click.ParamType  # type: ignore[assignment]

E = TypeVar("E", bound=Enum)


def _fail_noreturn(
    message: str,
    param: click.Parameter | None,
    ctx: click.Context | None,
) -> NoReturn:
    raise click.BadParameter(message, param=param, ctx=ctx)


class EnumChoiceParam(ParamTypeBase, Generic[E]):
    """A Click parameter type that converts a string to a member of a given Enum."""

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = self.enum_cls.__name__.lower()
        self.choices = [cast("str", getattr(e, "value", str(e))) for e in self.enum_cls]

    def convert(
        self,
        value: str | E | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E | None:
        """Convert a string to a member of the Enum (case-insensitive)."""
        if value is None or isinstance(value, self.enum_cls):
            return value
        lookup: dict[str, E] = {
            cast("str", getattr(choice, "value", str(choice))).lower(): choice
            for choice in cast("Iterable[E]", self.enum_cls)
        }
        key: str = str(value).lower()
        if key in lookup:
            return lookup[key]
        _fail_noreturn(
            f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
            param,
            ctx,
        )

    def shell_complete(
        self,
        ctx: click.Context,
        param: click.Parameter,
        incomplete: str,
    ) -> list[ClickCompletionItem]:
        """Complete enum values."""
        from click.shell_completion import CompletionItem as RuntimeCompletionItem

        prefix: str = (incomplete or "").lower()
        return [RuntimeCompletionItem(v) for v in self.choices if v.lower().startswith(prefix)]

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"EnumParam({self.enum_cls.__name__})"


class DottedPathParam(ParamTypeBase):
    """A dotted configuration path such as ``bar.layout.left[0]``.

    Conversion only checks the grammar and normalizes the text; schema lookup happens
    in the engine so the error carries the proper exit code.
    """

    name = "path"

    def convert(
        self,
        value: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> str:
        """Return the canonical path text."""
        try:
            return format_path(parse_path(value))
        except PathSyntaxError as exc:
            _fail_noreturn(str(exc), param, ctx)

    def shell_complete(
        self,
        ctx: click.Context,
        param: click.Parameter,
        incomplete: str,
    ) -> list[ClickCompletionItem]:
        """Complete paths from the packaged schema.

        Bash: `eval "$(_SHELLCONF_COMPLETE=bash_source shellconf)"`
        """
        from click.shell_completion import CompletionItem as RuntimeCompletionItem

        from shellconf.schema.builder import load_default_schema

        paths: list[str] = [n.path for n in load_default_schema().walk() if n.path]
        return [RuntimeCompletionItem(p) for p in paths if p.startswith(incomplete or "")]
