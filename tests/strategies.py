"""Shared hypothesis strategies for easyviewer property-based testing.

Provides reusable strategies at two levels:

- **Markup**: text with and without ``{{ ... }}`` markers
- **Expressions**: identifiers and values for arithmetic and rewriting

Individual test modules compose them into property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Markup strategies
# ---------------------------------------------------------------------------

# Plain text without braces, so it can never contain a marker.
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{}\x00\r",
    ),
    min_size=1,
    max_size=200,
)

# Arbitrary text that might stress the scanner (fuzz-like)
arbitrary_markup = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

# ---------------------------------------------------------------------------
# Expression strategies
# ---------------------------------------------------------------------------

# Identifiers safe to use as context keys (no keywords, no registered functions)
safe_identifier = st.sampled_from(
    [
        "x",
        "y",
        "a",
        "b",
        "val",
        "item",
        "count",
        "name",
        "title",
        "foo",
        "bar",
        "num",
        "text",
        "flag",
        "total",
        "score",
        "idx",
        "username",
    ]
)

# Integer values in a safe range for arithmetic tests
safe_integer = st.integers(min_value=-10_000, max_value=10_000)

# Marker-safe string values: printable, no quotes, backslashes or braces
safe_string = st.text(
    alphabet=st.characters(
        whitelist_categories=("Ll", "Lu", "Nd"),
        whitelist_characters=" -_.",
    ),
    min_size=0,
    max_size=30,
).filter(lambda s: s.isascii())

# Context mappings from safe identifiers to ints or strings
context_data = st.dictionaries(
    safe_identifier,
    st.one_of(safe_integer, safe_string),
    max_size=6,
)
