"""Notion rich_text arrays back to inline Markdown.

The output is the inline dialect :func:`~.inline.format_inline` reads,
so a rendered run parses back to the same styling. Wrapping order,
innermost first::

    code -> link -> italic -> bold -> strikethrough

Putting the link inside the emphasis markers keeps a styled link
parseable: ``**[docs](https://...)**`` rather than ``[**docs**](...)``,
whose label the formatter would keep literal. Adjacent segments with the
same styling and link are merged first so that runs split at the
2000-unit limit do not render as ``**a****b**``.

No escaping is applied; the formatter has no escape syntax to undo it.
"""

from __future__ import annotations

from typing import Any

_STYLE_KEYS = ("bold", "italic", "strikethrough", "code")


def _segment_parts(seg: dict[str, Any]) -> tuple[str, tuple[bool, ...], str | None]:
    text = seg.get("text") or {}
    # API responses carry "plain_text"/"href"; locally built blocks only "text".
    content = text.get("content")
    if content is None:
        content = seg.get("plain_text", "")
    link = (text.get("link") or {}).get("url") or seg.get("href")
    annotations = seg.get("annotations") or {}
    styles = tuple(bool(annotations.get(key, False)) for key in _STYLE_KEYS)
    return content, styles, link


def merge_segments(segments: list[dict[str, Any]]) -> list[tuple[str, tuple[bool, ...], str | None]]:
    """Collapse neighbouring segments that share styles and link."""
    merged: list[tuple[str, tuple[bool, ...], str | None]] = []
    for seg in segments:
        content, styles, link = _segment_parts(seg)
        if merged and merged[-1][1:] == (styles, link):
            prev = merged[-1]
            merged[-1] = (prev[0] + content, styles, link)
        else:
            merged.append((content, styles, link))
    return merged


def render_run(content: str, styles: tuple[bool, ...], link: str | None) -> str:
    bold, italic, strikethrough, code = styles
    if not content:
        return ""
    text = f"`{content}`" if code else content
    if link:
        text = f"[{text}]({link})"
    if italic:
        text = f"*{text}*" if "_" in text else f"_{text}_"
    if bold:
        text = f"__{text}__" if "*" in text and "_" not in text else f"**{text}**"
    if strikethrough:
        text = f"~~{text}~~"
    return text


def render_rich_text(segments: list[dict[str, Any]]) -> str:
    """Render a Notion rich_text array to inline Markdown.

    Parameters
    ----------
    segments:
        rich_text objects, either built by
        :meth:`~confluence2notion.models.TextRun.to_rich_text` or
        returned by the Notion API.

    Returns
    -------
    str
        Inline Markdown; ``""`` for an empty array.
    """
    if not segments:
        return ""
    return "".join(render_run(*parts) for parts in merge_segments(segments))
