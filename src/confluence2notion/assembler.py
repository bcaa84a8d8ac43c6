"""Turn converted blocks into a Notion page.

:class:`PageAssembler` validates the request, adds the provenance
callout and the empty-document placeholder, then uploads: the page is
created with the first 100 blocks and the remainder is appended in
sequential batches. Progress is reported through an optional callback
as a non-decreasing percentage:

==========  ============================================
 70         creating the page
 80         page created with the first batch
 80..95     ``80 + floor(k / n * 15)`` after append batch k of n
 95         finalizing
 100        done
==========  ============================================

Once the page exists, a failed append raises :class:`PartialUploadError`
so the caller still learns where the partial page is.
"""

from __future__ import annotations

import dataclasses
import time
from collections.abc import Callable
from typing import Any

from confluence2notion.config import ExportConfig
from confluence2notion.converter.blocks import SOURCE_CALLOUT_EMOJI, callout_block, paragraph_block
from confluence2notion.converter.inline import plain_runs, validate_url
from confluence2notion.errors import ExportError, ExportValidationError, PartialUploadError
from confluence2notion.models import PageCreateResult, PageCreationRequest
from confluence2notion.notion_api.blocks import AsyncBlockAPI, extract_block_ids
from confluence2notion.notion_api.pages import AsyncPageAPI, title_properties
from confluence2notion.observability import NoopMetricsHook, get_logger
from confluence2notion.utils.chunk import chunk_children
from confluence2notion.utils.page_id import extract_page_id
from confluence2notion.utils.text_split import RICH_TEXT_LIMIT, utf16_len

log = get_logger("confluence2notion.assembler")

ProgressCallback = Callable[[int, str], None]
"""``on_progress(percent, message)``."""

PROGRESS_CREATING = 70
PROGRESS_CREATED = 80
PROGRESS_APPEND_SPAN = 15
PROGRESS_FINALIZING = 95
PROGRESS_DONE = 100


class ProgressReporter:
    """Forwards progress to a callback, never letting the value go down."""

    __slots__ = ("_callback", "last")

    def __init__(self, callback: ProgressCallback | None) -> None:
        self._callback = callback
        self.last = 0

    def __call__(self, percent: int, message: str) -> None:
        self.last = max(self.last, min(percent, PROGRESS_DONE))
        if self._callback is not None:
            self._callback(self.last, message)


def page_url_for(page_id: str) -> str:
    return f"https://www.notion.so/{page_id.replace('-', '')}"


class PageAssembler:
    """Creates a Notion page from a list of blocks.

    Parameters
    ----------
    pages:
        Page API used for the create call.
    blocks:
        Block API used for the append calls.
    config:
        Supplies the placeholder text, the source callout prefix and
        the metrics hook.
    """

    def __init__(self, pages: AsyncPageAPI, blocks: AsyncBlockAPI, config: ExportConfig) -> None:
        self._pages = pages
        self._blocks = blocks
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    # ------------------------------------------------------------------
    # Request preparation
    # ------------------------------------------------------------------

    def prepare(
        self,
        title: str,
        blocks: list[dict[str, Any]],
        parent_id: str,
        source_url: str | None = None,
    ) -> PageCreationRequest:
        """Validate inputs and build the final block list.

        Raises
        ------
        ExportValidationError
            For a blank title or an unparseable parent id. Nothing has
            been sent at that point.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise ExportValidationError(
                "Page title is required",
                context={"field": "title", "value": title},
            )
        page_id = extract_page_id(parent_id)

        final_blocks = list(blocks)
        if not final_blocks:
            final_blocks.append(paragraph_block(plain_runs(self._config.placeholder_text)))
        if source_url:
            final_blocks.insert(0, self.source_callout(source_url))

        return PageCreationRequest(
            title=clean_title,
            parent_id=page_id,
            blocks=final_blocks,
            source_url=source_url,
        )

    def source_callout(self, source_url: str) -> dict[str, Any]:
        """Gray 📄 callout linking back to the Confluence page."""
        # Notion caps link URLs at the same length as text content.
        link = validate_url(source_url) if utf16_len(source_url) <= RICH_TEXT_LIMIT else None
        runs = plain_runs(self._config.source_callout_prefix)
        runs.extend(dataclasses.replace(run, link=link) for run in plain_runs(source_url))
        return callout_block(runs, SOURCE_CALLOUT_EMOJI, "gray_background")

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def create_page(
        self,
        title: str,
        blocks: list[dict[str, Any]],
        parent_id: str,
        source_url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PageCreateResult:
        """Create the page and upload every block.

        Parameters
        ----------
        title:
            Page title.
        blocks:
            Top-level blocks, in page order. May be empty.
        parent_id:
            Parent page id or page URL.
        source_url:
            Confluence page URL for the provenance callout.
        on_progress:
            Called with ``(percent, message)``; see the module docstring.

        Returns
        -------
        PageCreateResult

        Raises
        ------
        ExportValidationError
            Before any request, for invalid input.
        ExportError
            When the create call itself fails; no page exists.
        PartialUploadError
            When an append fails after the page was created.
        """
        request = self.prepare(title, blocks, parent_id, source_url)
        report = ProgressReporter(on_progress)
        t0 = time.monotonic()

        batches = chunk_children(request.blocks)
        total = len(request.blocks)

        report(PROGRESS_CREATING, "Creating Notion page")
        page = await self._pages.create(
            parent={"page_id": request.parent_id},
            properties=title_properties(request.title),
            children=batches[0],
        )
        page_id = page["id"]
        page_url = page.get("url") or page_url_for(page_id)
        sent = len(batches[0])
        self._metrics.increment("blocks.created_total", sent)
        report(PROGRESS_CREATED, "Page created")

        appends = batches[1:]
        for k, batch in enumerate(appends, start=1):
            try:
                response = await self._blocks.append_children(page_id, batch)
            except ExportError as exc:
                log.error(
                    "append failed after page creation",
                    extra={"extra_fields": {
                        "op": "append",
                        "page_id": page_id,
                        "blocks_sent": sent,
                        "blocks_total": total,
                        "error_code": exc.code,
                    }},
                )
                raise PartialUploadError(
                    f"Page created but only {sent} of {total} blocks were uploaded: {exc.message}",
                    context={
                        "page_id": page_id,
                        "page_url": page_url,
                        "blocks_sent": sent,
                        "blocks_total": total,
                    },
                    cause=exc,
                ) from exc
            sent += len(batch)
            self._metrics.increment("blocks.created_total", len(batch))
            log.debug(
                "blocks appended",
                extra={"extra_fields": {
                    "page_id": page_id,
                    "appended": len(extract_block_ids(response)) or len(batch),
                    "blocks_sent": sent,
                }},
            )
            report(
                PROGRESS_CREATED + (k * PROGRESS_APPEND_SPAN) // len(appends),
                f"Uploaded batch {k} of {len(appends)}",
            )

        report(PROGRESS_FINALIZING, "Finalizing")
        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing("page_export.duration_ms", elapsed_ms)
        log.info(
            "page created",
            extra={"extra_fields": {
                "op": "create_page",
                "page_id": page_id,
                "blocks": total,
                "batches": len(batches),
                "duration_ms": round(elapsed_ms, 1),
            }},
        )
        report(PROGRESS_DONE, "Done")

        return PageCreateResult(page_id=page_id, url=page_url, blocks_created=total)
