"""Tables, on both sides of the Markdown stage.

HTML side
    :func:`build_span_grid` lays HTML cells with ``rowspan``/``colspan``
    out on a rectangular grid. The column count comes from the first
    row; a spanning cell keeps its text at the top-left position and
    every other covered position gets :data:`SPAN_FILLER`.
    :func:`render_pipe_table` then writes the grid as a pipe table.

Markdown side
    :func:`parse_table` reads a pipe table back and
    :func:`build_table_block` turns it into a Notion ``table`` block whose
    rows are ``table_row`` children.
"""

from __future__ import annotations

import re
from typing import Any

from confluence2notion.models import SpanCell, TableParseResult

from .inline import format_inline, rich_text

SPAN_FILLER = " "
"""Placeholder for grid positions covered by another cell's span."""

_SEPARATOR_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\|[\s\-:]+(\|[\s\-:]+)*\|\s*$"),
    re.compile(r"^[\s\-:]+(\|[\s\-:]+)+[\s\-:]*$"),
)

_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")
_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# HTML side: span grid
# ---------------------------------------------------------------------------

def clean_cell_text(text: str) -> str:
    """Collapse whitespace and escape pipes; blank cells become the filler."""
    text = _WHITESPACE_RE.sub(" ", text or "").strip()
    return text.replace("|", "\\|") if text else SPAN_FILLER


def build_span_grid(rows: list[list[SpanCell]]) -> list[list[str]]:
    """Resolve row and column spans into a full rectangular grid.

    Parameters
    ----------
    rows:
        Cells per ``<tr>``, in document order.

    Returns
    -------
    list[list[str]]
        ``len(rows)`` rows of exactly *N* strings, where *N* is the sum
        of the first row's colspans. Cells that find no free column are
        dropped; spans reaching past the last row or column are clipped.
    """
    if not rows:
        return []

    width = sum(max(1, cell.colspan) for cell in rows[0])
    grid: list[list[str | None]] = [[None] * width for _ in rows]

    for r, row in enumerate(rows):
        col = 0
        for cell in row:
            while col < width and grid[r][col] is not None:
                col += 1
            if col >= width:
                break
            rowspan = max(1, cell.rowspan)
            colspan = max(1, cell.colspan)
            for dr in range(min(rowspan, len(rows) - r)):
                for dc in range(min(colspan, width - col)):
                    if grid[r + dr][col + dc] is None:
                        origin = dr == 0 and dc == 0
                        grid[r + dr][col + dc] = clean_cell_text(cell.text) if origin else SPAN_FILLER
            col += colspan

    return [[value if value is not None else SPAN_FILLER for value in row] for row in grid]


def render_pipe_table(grid: list[list[str]]) -> str:
    """Write *grid* as a pipe table with a separator after the first row."""
    if not grid:
        return ""
    width = len(grid[0])
    lines = ["| " + " | ".join(row) + " |" for row in grid]
    lines.insert(1, "|" + " --- |" * width)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Markdown side
# ---------------------------------------------------------------------------

def is_separator_row(line: str) -> bool:
    """True for ``|---|:--:|`` style alignment rows."""
    stripped = line.strip()
    # An all-blank row also matches the patterns but carries no dashes.
    return "-" in stripped and any(p.match(stripped) for p in _SEPARATOR_RES)


def parse_table_row(line: str) -> list[str]:
    """Split one pipe-table row into stripped cell strings.

    One leading and one trailing pipe are dropped, ``\\|`` is kept as a
    literal pipe, and a run of trailing empty cells collapses to one.
    """
    s = line.strip()
    if s.startswith("|"):
        s = s[1:]
    if s.endswith("|") and not s.endswith("\\|"):
        s = s[:-1]
    cells = [cell.replace("\\|", "|").strip() for cell in _UNESCAPED_PIPE_RE.split(s)]
    while len(cells) > 1 and cells[-1] == "" and cells[-2] == "":
        cells.pop()
    return cells or [""]


def parse_table(lines: list[str], start: int) -> TableParseResult | None:
    """Read the pipe table starting at ``lines[start]``.

    Returns ``None`` when the lines do not form a table: nothing was
    collected, or a single row without a separator.
    """
    rows: list[list[str]] = []
    has_separator = False
    i = start
    while i < len(lines):
        line = lines[i]
        if is_separator_row(line):
            has_separator = True
        elif "|" in line:
            rows.append(parse_table_row(line))
        else:
            break
        i += 1

    if not rows or (len(rows) == 1 and not has_separator):
        return None
    return TableParseResult(headers=rows[0], rows=rows[1:], next_index=i)


def build_table_block(headers: list[str], rows: list[list[str]]) -> dict[str, Any]:
    """Notion ``table`` block; every row is padded or cut to the header width."""
    width = len(headers)

    def table_row(cells: list[str]) -> dict[str, Any]:
        fitted = (cells + [""] * width)[:width]
        return {
            "object": "block",
            "type": "table_row",
            "table_row": {"cells": [rich_text(format_inline(c)) for c in fitted]},
        }

    return {
        "object": "block",
        "type": "table",
        "table": {
            "table_width": width,
            "has_column_header": True,
            "has_row_header": False,
            "children": [table_row(headers)] + [table_row(r) for r in rows],
        },
    }
