"""Data models shared by the converter, the assembler and the client.

Blocks themselves are plain Notion block dicts
(``{"object": "block", "type": t, t: {...}}``) so they can be sent to the
API unchanged. The types here describe what flows *between* the stages:
rich-text runs, list and table intermediates, and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextRun:
    """A span of text with uniform styling and an optional link.

    ``content`` is at most 2000 UTF-16 code units once it has passed through
    :func:`~confluence2notion.converter.inline.format_inline`.
    """

    content: str
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False
    link: str | None = None

    @property
    def is_plain(self) -> bool:
        return not (self.bold or self.italic or self.strikethrough or self.code)

    def to_rich_text(self) -> dict[str, Any]:
        """Serialise to a Notion ``rich_text`` text object."""
        text: dict[str, Any] = {"content": self.content}
        if self.link:
            text["link"] = {"url": self.link}
        segment: dict[str, Any] = {"type": "text", "text": text}
        if not self.is_plain:
            segment["annotations"] = {
                "bold": self.bold,
                "italic": self.italic,
                "strikethrough": self.strikethrough,
                "underline": False,
                "code": self.code,
                "color": "default",
            }
        return segment


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

class ListKind(str, Enum):
    """Markdown list flavours and the Notion block type each maps to."""

    BULLET = "bulleted_list_item"
    NUMBER = "numbered_list_item"
    TASK = "to_do"


@dataclass
class ListItem:
    """One Markdown list line, before and after tree folding.

    Attributes
    ----------
    kind:
        Bullet, numbered or task item.
    content:
        Item text with the marker removed.
    indent:
        Leading whitespace width in columns.
    level:
        ``(indent - base_indent) // 2``, never negative.
    checked:
        Task state; always ``False`` for bullets and numbers.
    children:
        Items folded under this one.
    """

    kind: ListKind
    content: str
    indent: int
    level: int
    checked: bool = False
    children: list[ListItem] = field(default_factory=list)


@dataclass
class ListParseResult:
    blocks: list[dict[str, Any]]
    next_index: int


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SpanCell:
    """An HTML table cell with its span attributes."""

    text: str
    rowspan: int = 1
    colspan: int = 1


@dataclass
class TableParseResult:
    """A Markdown pipe table: header cells, body rows, index after it."""

    headers: list[str]
    rows: list[list[str]]
    next_index: int


# ---------------------------------------------------------------------------
# Conversion results
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue found while converting.

    Attributes
    ----------
    code:
        Machine-readable code such as ``"CODE_TRUNCATED"``.
    message:
        Human-readable description.
    context:
        Structured diagnostic data.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class ConversionResult:
    """Blocks produced from one Markdown document, plus warnings."""

    blocks: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Page assembly
# ---------------------------------------------------------------------------

@dataclass
class PageCreationRequest:
    """A validated page-creation request, ready to be sent.

    Attributes
    ----------
    title:
        Page title, stripped of surrounding whitespace.
    parent_id:
        Parent page id in dashed ``8-4-4-4-12`` form.
    blocks:
        Every block to upload, including the provenance callout and the
        empty-document placeholder when they apply.
    source_url:
        URL of the Confluence page the content came from.
    """

    title: str
    parent_id: str
    blocks: list[dict[str, Any]]
    source_url: str | None = None


@dataclass
class PageCreateResult:
    """Result of a successful page export.

    Attributes
    ----------
    page_id:
        Id of the new Notion page.
    url:
        URL of the new page.
    blocks_created:
        Number of top-level blocks uploaded.
    warnings:
        Conversion warnings collected on the way.
    """

    page_id: str
    url: str
    blocks_created: int
    warnings: list[ConversionWarning] = field(default_factory=list)
