"""Text cleanup helpers shared by the record loader and entity extractor."""

from __future__ import annotations

import re
from typing import Any


_WHITESPACE = re.compile(r"\s+")


def clean_text(value: Any) -> str:
    """Return a stripped string with internal whitespace collapsed.

    None and NaN-like values become the empty string.

    Examples:
        >>> clean_text("  Jane   Doe ")
        'Jane Doe'
        >>> clean_text(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def split_names(value: Any, delimiter: str = ", ") -> tuple[str, ...]:
    """Split a delimited participant field into clean, non-empty names.

    The export separates co-PIs with a comma and a space. Empty and
    whitespace-only entries are dropped, and the order of first appearance
    is kept without repeats.

    Examples:
        >>> split_names("Jane Doe, John Smith")
        ('Jane Doe', 'John Smith')
        >>> split_names("Jane Doe, , ")
        ('Jane Doe',)
    """
    text = "" if value is None else str(value)
    if not text.strip():
        return ()

    names: list[str] = []
    for part in text.split(delimiter):
        name = clean_text(part).strip(",").strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def title_key(title: str, case_insensitive: bool = True) -> str:
    """Comparison form of an award title."""
    text = clean_text(title)
    return text.lower() if case_insensitive else text
