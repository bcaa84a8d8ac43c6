"""Asynchronous export client.

:class:`AsyncExportClient` ties the pipeline together: Confluence HTML is
converted to Markdown, Markdown to Notion blocks, and the blocks are
uploaded as a new page under a parent the integration can access.

Usage::

    import asyncio
    from confluence2notion import AsyncExportClient

    async def main():
        async with AsyncExportClient(token="secret_xxx") as client:
            result = await client.create_page_from_html(
                parent_id="https://www.notion.so/Imports-2dadca9a3fff80278295e23720dd2a53",
                title="Release checklist",
                html=page_html,
                source_url="https://wiki.example.com/display/OPS/Release+checklist",
            )
            print(result.url)

    asyncio.run(main())
"""

from __future__ import annotations

import sys
from typing import Any

from confluence2notion.assembler import PageAssembler, ProgressCallback, ProgressReporter
from confluence2notion.config import ExportConfig
from confluence2notion.converter.html_to_md import html_to_markdown
from confluence2notion.converter.md_to_notion import MarkdownToNotionConverter
from confluence2notion.errors import ExportValidationError
from confluence2notion.models import ConversionResult, PageCreateResult
from confluence2notion.notion_api.blocks import AsyncBlockAPI
from confluence2notion.notion_api.pages import AsyncPageAPI
from confluence2notion.notion_api.transport import AsyncNotionTransport
from confluence2notion.observability import get_logger

log = get_logger("confluence2notion.client")

PROGRESS_START = 55
PROGRESS_CONVERTING = 60
PROGRESS_CONVERTED = 65


class AsyncExportClient:
    """Asynchronous Confluence-to-Notion export client.

    Parameters
    ----------
    token:
        Notion integration token. **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`ExportConfig`.

    Raises
    ------
    ExportValidationError
        If *token* is blank.
    """

    def __init__(self, token: str, **kwargs: Any) -> None:
        if not token or not token.strip():
            raise ExportValidationError(
                "A Notion integration token is required",
                context={"field": "token"},
            )
        self._config = ExportConfig(token=token.strip(), **kwargs)
        self._transport = AsyncNotionTransport(self._config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._converter = MarkdownToNotionConverter(self._config)
        self._assembler = PageAssembler(self._pages, self._blocks, self._config)

    @property
    def config(self) -> ExportConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def html_to_markdown(self, html: str, base_url: str | None = None) -> str:
        """Convert Confluence HTML to Markdown.

        Relative links and images are resolved against *base_url*, or
        against ``config.image_base_url`` when *base_url* is not given.
        """
        markdown = html_to_markdown(html, base_url or self._config.image_base_url)
        if self._config.debug_dump_markdown:
            print("[confluence2notion] Markdown:", markdown, sep="\n", file=sys.stderr)
        return markdown

    def markdown_to_blocks(self, markdown: str) -> ConversionResult:
        """Convert Markdown to Notion blocks without touching the network."""
        return self._converter.convert(markdown)

    # ------------------------------------------------------------------
    # Page creation
    # ------------------------------------------------------------------

    async def create_page_from_markdown(
        self,
        parent_id: str,
        title: str,
        markdown: str,
        source_url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PageCreateResult:
        """Create a Notion page from Markdown.

        Parameters
        ----------
        parent_id:
            Parent page id or Notion page URL.
        title:
            Page title.
        markdown:
            Markdown in the dialect :func:`html_to_markdown` produces.
        source_url:
            Original Confluence page URL; adds a provenance callout.
        on_progress:
            ``(percent, message)`` callback, non-decreasing from 55 to 100.

        Returns
        -------
        PageCreateResult
            Includes every conversion warning.

        Raises
        ------
        ExportValidationError
            For a blank title or Markdown body or a bad parent id, before
            any request is sent.
        ExportConversionError
            When nothing converts and ``empty_document_policy="raise"``.
        PartialUploadError
            When an append fails after the page was created.
        """
        if not markdown or not markdown.strip():
            raise ExportValidationError(
                "Markdown content is required",
                context={"field": "markdown"},
            )
        return await self._export(parent_id, title, markdown, source_url, on_progress)

    async def create_page_from_html(
        self,
        parent_id: str,
        title: str,
        html: str,
        source_url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PageCreateResult:
        """Create a Notion page from Confluence HTML.

        *source_url* doubles as the base URL for relative links and
        images. A page body with no convertible content yields the
        placeholder paragraph (or :class:`ExportConversionError` under
        ``empty_document_policy="raise"``). See
        :meth:`create_page_from_markdown` for the rest.
        """
        markdown = self.html_to_markdown(html, base_url=source_url)
        return await self._export(parent_id, title, markdown, source_url, on_progress)

    async def _export(
        self,
        parent_id: str,
        title: str,
        markdown: str,
        source_url: str | None,
        on_progress: ProgressCallback | None,
    ) -> PageCreateResult:
        # Fail on bad input before spending time on conversion.
        self._assembler.prepare(title, [], parent_id)

        report = ProgressReporter(on_progress)
        report(PROGRESS_START, "Starting export")
        report(PROGRESS_CONVERTING, "Converting Markdown to Notion blocks")
        conversion = self._converter.convert(markdown)
        report(PROGRESS_CONVERTED, f"Generated {len(conversion.blocks)} blocks")

        result = await self._assembler.create_page(
            title,
            conversion.blocks,
            parent_id,
            source_url=source_url,
            on_progress=on_progress,
        )
        result.warnings.extend(conversion.warnings)
        log.info(
            "export finished",
            extra={"extra_fields": {
                "op": "export",
                "page_id": result.page_id,
                "blocks_created": result.blocks_created,
                "warnings": len(result.warnings),
            }},
        )
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncExportClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
