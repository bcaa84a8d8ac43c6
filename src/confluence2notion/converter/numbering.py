"""Strip auto-numbering debris from list item text.

Confluence renders numbered headings and outline lists with their
counters baked into the text. After HTML conversion those counters end
up in front of the list marker's own content, often doubled by the
renderer (``11、Intro`` for item 1, ``22.1. Scope`` for 2.1) or glued to a
link (``3[3.1.Setup](...)``). Notion numbers list items itself, so the
leftovers are removed.

The rules are ordered; each one is applied once, in sequence, to the
result of the previous one. The pass is optional and controlled by
:attr:`ExportConfig.strip_numbering_artifacts`.
"""

from __future__ import annotations

import re

_NUMBERING_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # Doubled leading digit followed by a section number: "11.2、", "22.1.3."
    (re.compile(r"^(\d)\1+\.(\d+)[、.]\s*"), ""),
    (re.compile(r"^(\d)\1+\.(\d+)\.(\d+)[、.]\s*"), ""),
    (re.compile(r"^(\d)\1+\.(\d+)\.(\d+)\.(\d+)[、.]\s*"), ""),
    # Doubled digit alone: "11、", "22."
    (re.compile(r"^(\d)\1+[、.]\s*"), ""),
    # Counter glued to a link label: "3[3.1、Setup](...)" -> "[Setup](...)"
    (re.compile(r"^(\d+)\[(\d+)[、.]"), "["),
    (re.compile(r"^(\d+)\[(\d+\.\d+)[、.]"), "["),
    (re.compile(r"^(\d+)\[(\d+\.\d+\.\d+)[、.]"), "["),
    (re.compile(r"^(\d)\1+\[(\d)\2+[、.]"), "["),
    # Plain outline numbers, deepest first.
    (re.compile(r"^\d+\.\d+\.\d+\.\d+[、.]\s*"), ""),
    (re.compile(r"^\d+\.\d+\.\d+[、.]\s*"), ""),
    (re.compile(r"^\d+\.\d+[、.]\s*"), ""),
    (re.compile(r"^\d+[、.]\s*"), ""),
    # Two section numbers separated by whitespace: "1.2 1.2."
    (re.compile(r"^\d+\.\d+\s+\d+\.\d+[、.]\s*"), ""),
)


def strip_numbering_artifacts(text: str) -> str:
    """Remove leftover outline numbering from the start of *text*.

    >>> strip_numbering_artifacts("11、Overview")
    'Overview'
    >>> strip_numbering_artifacts("2.3. Rollout plan")
    'Rollout plan'
    >>> strip_numbering_artifacts("Plain item")
    'Plain item'
    """
    for pattern, replacement in _NUMBERING_RULES:
        text = pattern.sub(replacement, text, count=1)
    return text
