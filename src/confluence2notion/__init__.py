"""confluence2notion -- Confluence HTML to Notion page export core.

Public re-exports
-----------------

* **Client:** :class:`AsyncExportClient`
* **Configuration:** :class:`ExportConfig`
* **Errors:** Every :class:`ExportError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses and the intermediate conversion types
* **Conversion:** :func:`html_to_markdown`, :class:`MarkdownToNotionConverter`,
  :class:`BlocksToMarkdownRenderer`

Usage::

    from confluence2notion import AsyncExportClient

    async with AsyncExportClient(token="secret_xxx") as client:
        result = await client.create_page_from_markdown(
            parent_id="<page_id or page URL>",
            title="My Page",
            markdown="# Hello\\n\\nWorld",
        )
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from confluence2notion.assembler import PageAssembler
from confluence2notion.async_client import AsyncExportClient

# ── Configuration ───────────────────────────────────────────────────────
from confluence2notion.config import ExportConfig

# ── Conversion ──────────────────────────────────────────────────────────
from confluence2notion.converter import (
    BlocksToMarkdownRenderer,
    MarkdownToNotionConverter,
    html_to_markdown,
)

# ── Errors ──────────────────────────────────────────────────────────────
from confluence2notion.errors import (
    ErrorCode,
    ExportAPIError,
    ExportAuthError,
    ExportConversionError,
    ExportError,
    ExportNetworkError,
    ExportPermissionError,
    ExportRateLimitError,
    ExportTimeoutError,
    ExportValidationError,
    PartialUploadError,
)

# ── Models ──────────────────────────────────────────────────────────────
from confluence2notion.models import (
    ConversionResult,
    ConversionWarning,
    ListItem,
    ListKind,
    PageCreateResult,
    PageCreationRequest,
    SpanCell,
    TextRun,
)
from confluence2notion.utils.page_id import extract_page_id

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "AsyncExportClient",
    "PageAssembler",
    # Configuration
    "ExportConfig",
    # Conversion
    "html_to_markdown",
    "MarkdownToNotionConverter",
    "BlocksToMarkdownRenderer",
    "extract_page_id",
    # Errors
    "ExportError",
    "ErrorCode",
    "ExportValidationError",
    "ExportAuthError",
    "ExportPermissionError",
    "ExportRateLimitError",
    "ExportNetworkError",
    "ExportTimeoutError",
    "ExportAPIError",
    "ExportConversionError",
    "PartialUploadError",
    # Models
    "TextRun",
    "ListKind",
    "ListItem",
    "SpanCell",
    "ConversionWarning",
    "ConversionResult",
    "PageCreationRequest",
    "PageCreateResult",
]
