"""Notion block tree back to Markdown.

Serialises the block subset the tokenizer produces into the Markdown
dialect the tokenizer reads, so that::

    tokenize(BlocksToMarkdownRenderer().render_blocks(blocks))

gives back ``blocks`` for tokenizer output. Blocks are separated by a
blank line, except that consecutive list items are kept on adjacent
lines so they stay one list. Block types outside that subset are
reduced to their plain text and reported in :attr:`warnings`.

Usage::

    from confluence2notion.converter.notion_to_md import BlocksToMarkdownRenderer

    md = BlocksToMarkdownRenderer().render_blocks(blocks)
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from typing import Any

from confluence2notion.models import ConversionWarning

from .blocks import fence_for
from .html_to_md import quote_lines
from .inline_renderer import render_rich_text

_LIST_TYPES: frozenset[str] = frozenset({
    "bulleted_list_item",
    "numbered_list_item",
    "to_do",
})

_INDENT = "  "


def _children(block: dict[str, Any]) -> list[dict[str, Any]]:
    data = block.get(block.get("type", ""), {})
    return data.get("children") or block.get("children") or []


def _text(block: dict[str, Any]) -> str:
    data = block.get(block.get("type", ""), {})
    return render_rich_text(data.get("rich_text", []))


class BlocksToMarkdownRenderer:
    """Renders Notion block dicts to Markdown.

    :attr:`warnings` is reset on each :meth:`render_blocks` call and
    lists the blocks that could only be rendered approximately.
    """

    def __init__(self) -> None:
        self.warnings: list[ConversionWarning] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_blocks(self, blocks: list[dict[str, Any]]) -> str:
        """Render *blocks* to a Markdown document.

        Returns
        -------
        str
            Markdown ending in a single newline, or ``""`` when there
            is nothing to render.
        """
        self.warnings = []
        markdown = self._render_block_list(blocks, depth=0)
        return markdown + "\n" if markdown else ""

    # ------------------------------------------------------------------
    # Internal: dispatch and list iteration
    # ------------------------------------------------------------------

    def _render_block_list(self, blocks: list[dict[str, Any]], depth: int) -> str:
        out = ""
        number = 0
        prev_type = ""
        for block in blocks:
            block_type = block.get("type", "")
            if block_type == "numbered_list_item":
                number += 1
                rendered = self._render_list_item(block, depth, f"{number}. ")
            else:
                number = 0
                rendered = self._dispatch(block, depth)
            if not rendered:
                continue
            if out:
                joined_list = block_type in _LIST_TYPES and prev_type in _LIST_TYPES
                out += "\n" if joined_list else "\n\n"
            out += rendered
            prev_type = block_type
        return out

    def _dispatch(self, block: dict[str, Any], depth: int) -> str:
        renderer = _BLOCK_RENDERERS.get(block.get("type", ""))
        if renderer is not None:
            return renderer(self, block, depth)
        return self._render_unsupported(block)

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_heading(self, block: dict[str, Any], depth: int) -> str:
        level = int(block["type"][-1])
        return f"{'#' * level} {_text(block)}"

    def _render_paragraph(self, block: dict[str, Any], depth: int) -> str:
        return _text(block)

    def _render_list_item(self, block: dict[str, Any], depth: int, marker: str) -> str:
        line = f"{_INDENT * depth}{marker}{_text(block)}"
        children = _children(block)
        if not children:
            return line
        return line + "\n" + self._render_block_list(children, depth + 1)

    def _render_bulleted_list_item(self, block: dict[str, Any], depth: int) -> str:
        return self._render_list_item(block, depth, "- ")

    def _render_to_do(self, block: dict[str, Any], depth: int) -> str:
        checked = block.get("to_do", {}).get("checked", False)
        return self._render_list_item(block, depth, f"- [{'x' if checked else ' '}] ")

    def _render_quote_like(self, text: str, block: dict[str, Any]) -> str:
        parts = [quote_lines(text)] if text else []
        children = _children(block)
        if children:
            parts.append(quote_lines(self._render_block_list(children, 0)))
        return "\n".join(parts) or ">"

    def _render_quote(self, block: dict[str, Any], depth: int) -> str:
        return self._render_quote_like(_text(block), block)

    def _render_callout(self, block: dict[str, Any], depth: int) -> str:
        icon = block.get("callout", {}).get("icon") or {}
        emoji = icon.get("emoji", "") if icon.get("type") == "emoji" else ""
        text = _text(block)
        return self._render_quote_like(f"{emoji} {text}".strip(), block)

    def _render_code(self, block: dict[str, Any], depth: int) -> str:
        data = block.get("code", {})
        language = data.get("language", "")
        if language == "plain text":
            language = ""
        code = "".join(
            (seg.get("text") or {}).get("content", seg.get("plain_text", ""))
            for seg in data.get("rich_text", [])
        )
        fence = fence_for(code)
        return f"{fence}{language}\n{code}\n{fence}"

    def _render_divider(self, block: dict[str, Any], depth: int) -> str:
        return "---"

    def _render_image(self, block: dict[str, Any], depth: int) -> str:
        data = block.get("image", {})
        source = data.get(data.get("type", "external"), {})
        caption = render_rich_text(data.get("caption", []))
        return f"![{caption}]({source.get('url', '')})"

    def _render_table(self, block: dict[str, Any], depth: int) -> str:
        data = block.get("table", {})
        width = data.get("table_width", 0)
        rows = [c for c in _children(block) if c.get("type") == "table_row"]
        if not rows or width < 1:
            return ""

        lines: list[str] = []
        for i, row in enumerate(rows):
            cells = [
                render_rich_text(cell).replace("|", "\\|")
                for cell in row.get("table_row", {}).get("cells", [])
            ]
            cells = (cells + [""] * width)[:width]
            lines.append("| " + " | ".join(cells) + " |")
            if i == 0:
                lines.append("|" + " --- |" * width)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------

    def _render_unsupported(self, block: dict[str, Any]) -> str:
        block_type = block.get("type", "unknown")
        self.warnings.append(ConversionWarning(
            code="UNSUPPORTED_BLOCK",
            message=f"Block type '{block_type}' has no Markdown form; kept its text only.",
            context={"block_type": block_type, "block_id": block.get("id", "")},
        ))
        data = block.get(block_type)
        if isinstance(data, dict):
            return render_rich_text(data.get("rich_text", []))
        return ""


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[[BlocksToMarkdownRenderer, dict, int], str]

_BLOCK_RENDERERS: dict[str, _BlockRenderer] = {
    "heading_1": BlocksToMarkdownRenderer._render_heading,
    "heading_2": BlocksToMarkdownRenderer._render_heading,
    "heading_3": BlocksToMarkdownRenderer._render_heading,
    "paragraph": BlocksToMarkdownRenderer._render_paragraph,
    "bulleted_list_item": BlocksToMarkdownRenderer._render_bulleted_list_item,
    # numbered_list_item is numbered in _render_block_list
    "to_do": BlocksToMarkdownRenderer._render_to_do,
    "quote": BlocksToMarkdownRenderer._render_quote,
    "callout": BlocksToMarkdownRenderer._render_callout,
    "code": BlocksToMarkdownRenderer._render_code,
    "divider": BlocksToMarkdownRenderer._render_divider,
    "image": BlocksToMarkdownRenderer._render_image,
    "table": BlocksToMarkdownRenderer._render_table,
}
