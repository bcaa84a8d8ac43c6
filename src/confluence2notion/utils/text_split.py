"""Length-limit splitting for rich-text content.

Notion measures ``rich_text[].text.content`` in UTF-16 code units, the
way JavaScript strings do. A character outside the Basic Multilingual
Plane (most emoji, CJK extension B and later) is one Python code point
but two units, so ``len()`` undercounts it.
"""

from __future__ import annotations

RICH_TEXT_LIMIT = 2000
"""Maximum UTF-16 length of one ``rich_text[].text.content`` value."""


def utf16_len(text: str) -> int:
    """Length of *text* in UTF-16 code units.

    >>> utf16_len("abc")
    3
    >>> utf16_len("\\U0001f600")
    2
    """
    return len(text.encode("utf-16-le")) // 2


def split_string(text: str, limit: int = RICH_TEXT_LIMIT) -> list[str]:
    """Cut *text* into pieces of at most *limit* UTF-16 code units.

    Cuts fall between code points, so a surrogate pair is never split.
    With ``limit=1`` a single astral character still forms its own
    two-unit piece.

    Parameters
    ----------
    text:
        The string to split.
    limit:
        Maximum piece length in code units, :data:`RICH_TEXT_LIMIT` by
        default.

    Returns
    -------
    list[str]
        Non-empty pieces whose concatenation equals *text*; ``[]`` for an
        empty string.

    Raises
    ------
    ValueError
        If *limit* is less than 1.

    Examples
    --------
    >>> split_string("abcdefg", 3)
    ['abc', 'def', 'g']
    >>> split_string("ab\\U0001f600cd", 3)
    ['ab', '\\U0001f600c', 'd']
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if utf16_len(text) == len(text):
        return [text[i : i + limit] for i in range(0, len(text), limit)]

    pieces: list[str] = []
    start = 0
    units = 0
    for i, ch in enumerate(text):
        width = 2 if ord(ch) > 0xFFFF else 1
        if units + width > limit and i > start:
            pieces.append(text[start:i])
            start = i
            units = 0
        units += width
    if start < len(text):
        pieces.append(text[start:])
    return pieces
