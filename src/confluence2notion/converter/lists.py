"""Markdown list runs to nested Notion list blocks.

A contiguous run of list lines is turned into blocks in three passes:

1. **Collect** -- every list line becomes a :class:`ListItem` whose
   ``level`` is its indentation relative to the first item, two columns
   per level. A blank line does not end the run when the next non-blank
   line is still a list item at or beyond the first item's indentation.
2. **Fold** -- a stack turns the flat item sequence into a tree: pop
   while the top of the stack is at the same level or deeper, then
   attach to whatever is left (or to the root).
3. **Flatten** -- Notion accepts two levels of ``children`` per request.
   Items at depth 0 and 1 keep native children. An item at depth 2 is
   emitted without children and its whole subtree follows it as
   siblings. Items at depth 3 and below are prefixed with
   ``[ind{depth + 1}]`` so the lost nesting stays visible.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from confluence2notion.models import ListItem, ListKind, ListParseResult
from confluence2notion.observability import get_logger

from .blocks import list_item_block
from .inline import format_inline
from .numbering import strip_numbering_artifacts

log = get_logger("confluence2notion.converter.lists")

_TASK_RE = re.compile(r"^(\s*)- \[([ xX])\]\s+(.+)$")
_BULLET_RE = re.compile(r"^(\s*)[-*+]\s+(.+)$")
_NUMBER_RE = re.compile(r"^(\s*)\d+\.\s+(.+)$")

INDENT_PER_LEVEL = 2
NATIVE_CHILD_DEPTH = 2
MARKER_DEPTH = 3


class ListLine(NamedTuple):
    kind: ListKind
    content: str
    indent: int
    checked: bool


def _indent_width(ws: str) -> int:
    return len(ws.expandtabs(4))


def match_list_item(line: str) -> ListLine | None:
    """Classify *line* as a task, bullet or numbered item, or ``None``."""
    m = _TASK_RE.match(line)
    if m:
        return ListLine(ListKind.TASK, m.group(3), _indent_width(m.group(1)), m.group(2) in "xX")
    m = _BULLET_RE.match(line)
    if m:
        return ListLine(ListKind.BULLET, m.group(2), _indent_width(m.group(1)), False)
    m = _NUMBER_RE.match(line)
    if m:
        return ListLine(ListKind.NUMBER, m.group(2), _indent_width(m.group(1)), False)
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_list(
    lines: list[str],
    start: int,
    *,
    strip_numbering: bool = True,
    native_depth: int = NATIVE_CHILD_DEPTH,
) -> ListParseResult:
    """Convert the list run beginning at ``lines[start]`` into blocks.

    Parameters
    ----------
    lines:
        The whole document, split into lines.
    start:
        Index of the run's first item.
    strip_numbering:
        Apply :func:`strip_numbering_artifacts` to bullet and numbered
        item text.
    native_depth:
        Depths below this keep native ``children``. Lower it when the
        list itself is nested inside another block.

    Returns
    -------
    ListParseResult
        Top-level list blocks and the index of the first line after the
        run.

    Raises
    ------
    ValueError
        If ``lines[start]`` is not a list item.
    """
    items, next_index = collect_items(lines, start)
    roots = fold_items(items)
    blocks: list[dict[str, Any]] = []
    _flatten(roots, 0, blocks, strip_numbering, native_depth)
    log.debug(
        "list run converted",
        extra={"extra_fields": {
            "start": start,
            "items": len(items),
            "top_level_blocks": len(blocks),
            "max_level": max(item.level for item in items),
        }},
    )
    return ListParseResult(blocks=blocks, next_index=next_index)


def collect_items(lines: list[str], start: int) -> tuple[list[ListItem], int]:
    """Gather the run's items; returns ``(items, next_index)``."""
    first = match_list_item(lines[start])
    if first is None:
        raise ValueError(f"line {start} is not a list item: {lines[start]!r}")

    base_indent = first.indent
    items: list[ListItem] = []
    i = start
    while i < len(lines):
        line = lines[i]
        if not line.strip():
            j = i + 1
            while j < len(lines) and not lines[j].strip():
                j += 1
            if j < len(lines) and _continues_run(lines[j], first.kind, base_indent, require_indent=True):
                i = j
                continue
            break

        if not _continues_run(line, first.kind, base_indent, require_indent=False):
            break
        entry = match_list_item(line)
        items.append(ListItem(
            kind=entry.kind,
            content=entry.content,
            indent=entry.indent,
            level=_level(entry.indent, base_indent),
            checked=entry.checked,
        ))
        i += 1
    return items, i


def fold_items(items: list[ListItem]) -> list[ListItem]:
    """Nest *items* by level; returns the root items."""
    roots: list[ListItem] = []
    stack: list[ListItem] = []
    for item in items:
        while stack and stack[-1].level >= item.level:
            stack.pop()
        (stack[-1].children if stack else roots).append(item)
        stack.append(item)
    return roots


def item_text(item: ListItem, depth: int, strip_numbering: bool = True) -> str:
    """Display text for *item* at tree *depth*, cleaned and marked."""
    text = item.content
    if strip_numbering and item.kind is not ListKind.TASK:
        text = strip_numbering_artifacts(text)
    if depth >= MARKER_DEPTH:
        text = f"[ind{depth + 1}] {text}"
    return text


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _level(indent: int, base_indent: int) -> int:
    return max(0, (indent - base_indent) // INDENT_PER_LEVEL)


def _continues_run(line: str, base_kind: ListKind, base_indent: int, *, require_indent: bool) -> bool:
    entry = match_list_item(line)
    if entry is None:
        return False
    if require_indent and entry.indent < base_indent:
        return False
    # A different marker at the top level starts a new list.
    return _level(entry.indent, base_indent) > 0 or entry.kind is base_kind


def _flatten(
    nodes: list[ListItem],
    depth: int,
    out: list[dict[str, Any]],
    strip_numbering: bool,
    native_depth: int,
) -> None:
    for node in nodes:
        runs = format_inline(item_text(node, depth, strip_numbering))
        if node.children and depth < native_depth:
            children: list[dict[str, Any]] = []
            _flatten(node.children, depth + 1, children, strip_numbering, native_depth)
            out.append(list_item_block(node.kind, runs, node.checked, children))
            continue
        out.append(list_item_block(node.kind, runs, node.checked))
        if node.children:
            _flatten(node.children, depth + 1, out, strip_numbering, native_depth)
