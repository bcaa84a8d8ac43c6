"""Inline Markdown to Notion rich-text runs.

:func:`format_inline` handles the inline dialect the HTML stage emits:
code spans, ``**bold**`` / ``__bold__``, ``~~strike~~``, ``*italic*`` /
``_italic_`` and ``[text](url)`` links. Every pattern is matched against
the whole string, matches are ordered by start offset, and a match that
overlaps one already taken is dropped. Code spans and links are leaves;
the other styles are re-scanned so that ``**bold _and italic_**``
composes both annotations on the inner run.

A rich_text segment produced by :func:`rich_text` looks like::

    {
        "type": "text",
        "text": {"content": "docs", "link": {"url": "https://..."}},
        "annotations": {"bold": true, "italic": false, ...}
    }

``annotations`` is omitted for unstyled runs.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any, NamedTuple
from urllib.parse import urlsplit

from confluence2notion.models import TextRun
from confluence2notion.utils.text_split import RICH_TEXT_LIMIT, split_string, utf16_len

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Collection order doubles as the tie-break for matches starting at the
# same offset.
_INLINE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("code", re.compile(r"`([^`]+)`")),
    ("bold", re.compile(r"\*\*([^*]+)\*\*")),
    ("bold", re.compile(r"__(?!_)([^_]+)__")),
    ("strikethrough", re.compile(r"~~([^~]+)~~")),
    ("italic", re.compile(r"(?<!\*)\*(?!\*)([^*]+?)\*(?!\*)")),
    ("italic", re.compile(r"(?<!_)_(?!_)([^_]+?)_(?!_)")),
    ("link", re.compile(r"\[([^\]]+)\]\(([^)]+)\)")),
)

_TERMINAL_KINDS = frozenset({"code", "link"})

_MARKUP_RE = re.compile(r"\*\*|__|\*|_|~~|`|\[")


class _Match(NamedTuple):
    start: int
    end: int
    kind: str
    content: str
    url: str | None


# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------

def validate_url(url: str | None) -> str | None:
    """Return a Notion-acceptable link target, or ``None``.

    Only absolute ``http``/``https`` URLs with a host are accepted.
    Protocol-relative ``//host/path`` is upgraded to ``https:``.
    """
    if not url:
        return None
    candidate = url.strip()
    if candidate.startswith("//"):
        candidate = "https:" + candidate
    if not candidate or any(ch.isspace() for ch in candidate):
        return None
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    return candidate


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_inline(text: str, limit: int = RICH_TEXT_LIMIT) -> list[TextRun]:
    """Parse inline Markdown into styled runs.

    Parameters
    ----------
    text:
        One logical line (or a few joined lines) of Markdown.
    limit:
        Per-run content ceiling; longer runs are split, keeping their
        styling and link.

    Returns
    -------
    list[TextRun]
        Never empty. Blank input yields a single run with empty content.
    """
    if not text or not text.strip():
        return [TextRun("")]

    runs = _parse(text, {})
    out: list[TextRun] = []
    for run in runs:
        if utf16_len(run.content) <= limit:
            out.append(run)
            continue
        out.extend(dataclasses.replace(run, content=piece) for piece in split_string(run.content, limit))
    return out or [TextRun("")]


def plain_runs(text: str, limit: int = RICH_TEXT_LIMIT) -> list[TextRun]:
    """Unstyled runs for *text*, split at *limit*; used for verbatim content."""
    return [TextRun(piece) for piece in split_string(text, limit)] or [TextRun("")]


def rich_text(runs: list[TextRun]) -> list[dict[str, Any]]:
    """Serialise runs to a Notion ``rich_text`` array."""
    return [run.to_rich_text() for run in runs]


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _collect(text: str) -> list[_Match]:
    found: list[_Match] = []
    for kind, pattern in _INLINE_PATTERNS:
        for m in pattern.finditer(text):
            url = m.group(2) if kind == "link" else None
            found.append(_Match(m.start(), m.end(), kind, m.group(1), url))
    found.sort(key=lambda m: m.start)

    accepted: list[_Match] = []
    last_end = 0
    for match in found:
        if match.start < last_end:
            continue
        accepted.append(match)
        last_end = match.end
    return accepted


def _parse(text: str, styles: dict[str, Any]) -> list[TextRun]:
    runs: list[TextRun] = []
    pos = 0
    for match in _collect(text):
        if match.start > pos:
            runs.append(TextRun(text[pos : match.start], **styles))
        runs.extend(_render(match, styles))
        pos = match.end
    if pos < len(text):
        runs.append(TextRun(text[pos:], **styles))
    return runs


def _render(match: _Match, styles: dict[str, Any]) -> list[TextRun]:
    if match.kind == "link":
        return [TextRun(match.content, **{**styles, "link": validate_url(match.url)})]

    merged = {**styles, match.kind: True}
    if match.kind in _TERMINAL_KINDS or not _MARKUP_RE.search(match.content):
        return [TextRun(match.content, **merged)]
    return _parse(match.content, merged)
