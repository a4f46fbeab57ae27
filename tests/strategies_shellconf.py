# topmark:header:start
#
#   project      : ShellConf
#   file         : strategies_shellconf.py
#   file_relpath : tests/strategies_shellconf.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating configuration documents and dotted paths.

Documents draw their keys from a small alphabet so that generated files overlap often,
which is where merge order matters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from hypothesis import strategies as st

from shellconf.io.types import ConfigSource

KEYS: tuple[str, ...] = ("bar", "general", "location", "scale", "modules", "font-size")

s_key: st.SearchStrategy[str] = st.sampled_from(KEYS)

s_scalar: st.SearchStrategy[Any] = st.one_of(
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.floats(allow_nan=False, allow_infinity=False, width=32),
    st.text(alphabet="abcxyz #-", max_size=8),
)

s_value: st.SearchStrategy[Any] = st.one_of(
    s_scalar,
    st.lists(s_scalar, max_size=3),
)

s_table: st.SearchStrategy[dict[str, Any]] = st.recursive(
    st.dictionaries(s_key, s_value, max_size=3),
    lambda children: st.dictionaries(s_key, st.one_of(s_value, children), max_size=3),
    max_leaves=12,
)


@st.composite
def s_sources(draw: st.DrawFn, max_docs: int = 4) -> list[ConfigSource]:
    """Draw an ordered list of documents with distinct paths."""
    tables: list[dict[str, Any]] = draw(st.lists(s_table, min_size=1, max_size=max_docs))
    return [
        ConfigSource(path=Path(f"/cfg/doc{idx}.toml"), table=table)
        for idx, table in enumerate(tables)
    ]


s_ident: st.SearchStrategy[str] = st.from_regex(r"[A-Za-z_][A-Za-z0-9_-]{0,6}", fullmatch=True)

s_segments: st.SearchStrategy[list[str | int]] = st.builds(
    lambda head, rest: [head, *rest],
    s_ident,
    st.lists(st.one_of(s_ident, st.integers(min_value=0, max_value=99)), max_size=4),
)
