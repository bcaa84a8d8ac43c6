"""Line-oriented Markdown to Notion block tokenizer.

The tokenizer walks the document one line at a time. At each non-blank
line the handlers in :data:`_LINE_HANDLERS` are tried in order; the first
one that recognises the line consumes it (plus any continuation lines)
and returns the blocks it produced together with the index to resume
from. The last handler, the paragraph, accepts anything, so every line
is consumed exactly once and output order follows input order.

Order of recognition:

1. fenced code (```` ``` ```` or longer fences)
2. ATX headings, clamped to Notion's three levels
3. horizontal rules
4. pipe tables
5. block quotes; a leading panel emoji turns them into callouts
6. bullet, numbered and task lists (see :mod:`.lists`)
7. standalone images
8. paragraphs, with flowchart lines kept verbatim

The table and list sub-parsers fail open: if they reject or choke on a
run, the line falls through to the next handler and a warning is kept.
"""

from __future__ import annotations

import re
from collections.abc import Callable as _Callable
from typing import Any

from confluence2notion.config import ExportConfig
from confluence2notion.models import ConversionWarning

from .blocks import (
    callout_block,
    callout_style,
    code_block,
    divider_block,
    heading_block,
    image_block,
    image_placeholder_block,
    paragraph_block,
    quote_block,
    split_leading_emoji,
    truncate_code,
)
from .inline import format_inline, plain_runs, validate_url
from .lists import NATIVE_CHILD_DEPTH, build_list, match_list_item
from .tables import build_table_block, is_separator_row, parse_table

_FENCE_RE = re.compile(r"^(`{3,})(.*)$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_HR_RE = re.compile(r"^(-{3,}|_{3,}|\*{3,})$")
_IMAGE_RE = re.compile(r"^!\[(.*?)\]\((.*?)\)$")
_QUOTE_MARKER_RE = re.compile(r"^(?:>\s?)+")
_FLOW_WORDS_RE = re.compile(r"[A-Z][a-z]+(?:\s*(?:→|->)\s*[A-Z][a-z]+)+")
_ARROW_RE = re.compile(r"→|->")

# Nested quote content becomes child blocks only at the top level.
_MAX_QUOTE_DEPTH = 1


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def tokenize(
    markdown: str,
    config: ExportConfig | None = None,
) -> tuple[list[dict[str, Any]], list[ConversionWarning]]:
    """Convert Markdown into Notion block dicts.

    Parameters
    ----------
    markdown:
        Document text; CRLF and CR line endings are accepted.
    config:
        Conversion options (heading overflow, numbering cleanup).

    Returns
    -------
    tuple[list[dict], list[ConversionWarning]]
        ``(blocks, warnings)``. Blank input yields no blocks.
    """
    ctx = _BuildContext(config or ExportConfig())
    lines = normalize_newlines(markdown).split("\n")
    return _tokenize_lines(lines, ctx, depth=0), ctx.warnings


class _BuildContext:
    """Mutable state shared by the handlers during one tokenize call."""

    __slots__ = ("config", "warnings")

    def __init__(self, config: ExportConfig) -> None:
        self.config = config
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


_HandlerResult = tuple[list[dict[str, Any]], int] | None


def _tokenize_lines(lines: list[str], ctx: _BuildContext, depth: int) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = []
    i = 0
    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue
        for handler in _LINE_HANDLERS:
            result = handler(lines, i, ctx, depth)
            if result is not None:
                produced, i = result
                blocks.extend(produced)
                break
    return blocks


# ---------------------------------------------------------------------------
# Line handlers
# ---------------------------------------------------------------------------

def _fenced_code(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    opening = lines[i]
    m = _FENCE_RE.match(opening.strip())
    if m is None:
        return None
    fence, info = m.group(1), m.group(2).strip()
    if "`" in info:
        # ```inline``` on one line is not a fence.
        return None

    indent = opening[: len(opening) - len(opening.lstrip())]
    body: list[str] = []
    j = i + 1
    while j < len(lines) and lines[j].strip() != fence:
        line = lines[j]
        if indent and line.startswith(indent):
            line = line[len(indent):]
        body.append(line)
        j += 1

    code = "\n".join(body)
    _, truncated = truncate_code(code)
    if truncated:
        ctx.add_warning(
            "CODE_TRUNCATED",
            f"Code block of {len(code)} characters was truncated to fit one rich-text run.",
            line=i + 1,
            length=len(code),
        )
    if j >= len(lines):
        ctx.add_warning("UNCLOSED_FENCE", "Code fence was never closed; consumed to end of document.", line=i + 1)
    return [code_block(code, info)], min(j + 1, len(lines))


def _heading(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    m = _HEADING_RE.match(lines[i].strip())
    if m is None:
        return None
    level = len(m.group(1))
    if level > 3:
        ctx.add_warning(
            "HEADING_OVERFLOW",
            f"Heading level {level} is not supported by Notion; applied '{ctx.config.heading_overflow}'.",
            line=i + 1,
            level=level,
        )
    block = heading_block(level, format_inline(m.group(2).strip()), ctx.config.heading_overflow)
    return [block], i + 1


def _divider(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    if _HR_RE.match(lines[i].strip()) is None:
        return None
    return [divider_block()], i + 1


def _table(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    stripped = lines[i].strip()
    if "|" not in stripped:
        return None
    followed_by_separator = i + 1 < len(lines) and is_separator_row(lines[i + 1])
    if not (stripped.startswith("|") or followed_by_separator):
        return None
    try:
        parsed = parse_table(lines, i)
    except (ValueError, IndexError) as exc:
        ctx.add_warning("TABLE_FALLBACK", f"Table could not be parsed: {exc}", line=i + 1)
        return None
    if parsed is None:
        return None
    return [build_table_block(parsed.headers, parsed.rows)], parsed.next_index


def _is_quote_line(line: str) -> bool:
    stripped = line.strip()
    return stripped == ">" or stripped.startswith("> ")


def _blockquote(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    if not lines[i].strip().startswith("> "):
        return None

    own: list[str] = []
    nested: list[str] = []
    j = i
    while j < len(lines) and _is_quote_line(lines[j]):
        content = lines[j].strip()[2:]
        if not _is_quote_line(content):
            own.append(content)
        elif depth < _MAX_QUOTE_DEPTH:
            nested.append(content)
        else:
            own.append(_QUOTE_MARKER_RE.sub("", content))
        j += 1

    children = _tokenize_lines(nested, ctx, depth + 1) if nested else None
    text = "\n".join(own).strip()

    emoji = split_leading_emoji(text)
    if emoji is not None:
        icon, color = callout_style(emoji[0])
        block = callout_block(format_inline(emoji[1].strip()), icon, color, children)
    else:
        block = quote_block(format_inline(text), children)
    return [block], j


def _list(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    if match_list_item(lines[i]) is None:
        return None
    try:
        parsed = build_list(
            lines,
            i,
            strip_numbering=ctx.config.strip_numbering_artifacts,
            native_depth=max(0, NATIVE_CHILD_DEPTH - depth),
        )
    except (ValueError, IndexError) as exc:
        ctx.add_warning("LIST_FALLBACK", f"List could not be parsed: {exc}", line=i + 1)
        return None
    return parsed.blocks, parsed.next_index


def _image(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    m = _IMAGE_RE.match(lines[i].strip())
    if m is None:
        return None
    alt, src = m.group(1).strip(), m.group(2).strip()
    url = validate_url(src)
    if url is None:
        ctx.add_warning(
            "IMAGE_PLACEHOLDER",
            "Image source is not an http(s) URL; emitted a placeholder callout.",
            line=i + 1,
            src=src[:200],
        )
        return [image_placeholder_block(alt, src)], i + 1
    return [image_block(url, alt)], i + 1


def looks_like_flowchart(text: str) -> bool:
    """True for ``Start → Review → Publish``-style lines."""
    if "→" not in text and "->" not in text:
        return False
    return bool(_FLOW_WORDS_RE.search(text)) or len(_ARROW_RE.split(text)) >= 3


def _paragraph(lines: list[str], i: int, ctx: _BuildContext, depth: int) -> _HandlerResult:
    text = lines[i].strip()
    runs = plain_runs(text) if looks_like_flowchart(text) else format_inline(text)
    return [paragraph_block(runs)], i + 1


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

_LineHandler = _Callable[[list[str], int, _BuildContext, int], _HandlerResult]

_LINE_HANDLERS: tuple[_LineHandler, ...] = (
    _fenced_code,
    _heading,
    _divider,
    _table,
    _blockquote,
    _list,
    _image,
    _paragraph,
)
