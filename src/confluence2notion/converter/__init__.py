"""HTML -> Markdown -> Notion conversion pipeline.

Public API:

- :func:`html_to_markdown` -- Confluence HTML to Markdown.
- :class:`MarkdownToNotionConverter` -- Markdown to Notion blocks.
- :func:`tokenize` -- the underlying line tokenizer.
- :class:`BlocksToMarkdownRenderer` -- Notion blocks back to Markdown.
- :func:`format_inline` -- inline Markdown to rich-text runs.
"""

from confluence2notion.converter.html_to_md import cleanup_markdown, html_to_markdown
from confluence2notion.converter.inline import format_inline
from confluence2notion.converter.md_to_notion import MarkdownToNotionConverter
from confluence2notion.converter.notion_to_md import BlocksToMarkdownRenderer
from confluence2notion.converter.tokenizer import tokenize

__all__ = [
    "BlocksToMarkdownRenderer",
    "MarkdownToNotionConverter",
    "cleanup_markdown",
    "format_inline",
    "html_to_markdown",
    "tokenize",
]
