"""Text measurement utilities for Pulido.

The layout algorithm measures text in display columns, not code points.

Example:
    >>> from pulido.utils.text import string_width
    >>> string_width("hello")
    5
    >>> string_width("你好")
    4
"""

from __future__ import annotations

import unicodedata

# East Asian Width classes that occupy two terminal columns
_WIDE = frozenset({"W", "F"})


def string_width(text: str) -> int:
    """Return the display width of text in columns.

    ASCII fast path: pure ASCII strings are as wide as they are long.
    Otherwise wide and fullwidth characters count two columns and
    combining marks count zero.

    Args:
        text: Text to measure (must not contain newlines)

    Returns:
        Number of columns the text occupies

    Examples:
        >>> string_width("")
        0
        >>> string_width("Café")
        4
    """
    if text.isascii():
        return len(text)

    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in _WIDE else 1
    return width


def trim_trailing_whitespace(parts: list[str]) -> int:
    """Strip trailing spaces and tabs from the end of an output buffer.

    Walks backwards over the buffer so whitespace split across several
    fragments is removed too. Mutates ``parts`` in place.

    Args:
        parts: Output fragments accumulated so far

    Returns:
        Number of characters removed
    """
    trimmed = 0
    while parts:
        last = parts[-1]
        stripped = last.rstrip(" \t")
        trimmed += len(last) - len(stripped)
        if stripped:
            parts[-1] = stripped
            break
        parts.pop()
    return trimmed
