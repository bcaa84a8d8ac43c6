"""Markdown to Notion conversion entry point.

:class:`MarkdownToNotionConverter` runs the line tokenizer, applies the
empty-document policy and reports warnings to the metrics hook. The
result is a :class:`ConversionResult` with the blocks and every
non-fatal warning.
"""

from __future__ import annotations

import json
import sys

from confluence2notion.config import ExportConfig
from confluence2notion.errors import ExportConversionError
from confluence2notion.models import ConversionResult
from confluence2notion.observability import NoopMetricsHook, get_logger
from confluence2notion.utils.redact import redact

from .tokenizer import tokenize

log = get_logger("confluence2notion.converter")


class MarkdownToNotionConverter:
    """Convert Markdown text to Notion API block payloads.

    Parameters
    ----------
    config:
        Heading overflow, numbering cleanup, empty-document policy and
        debug options are read from here.

    Examples
    --------
    >>> from confluence2notion.config import ExportConfig
    >>> converter = MarkdownToNotionConverter(ExportConfig())
    >>> result = converter.convert("# Hello\\n\\nWorld")
    >>> [b["type"] for b in result.blocks]
    ['heading_1', 'paragraph']
    """

    def __init__(self, config: ExportConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def convert(self, markdown: str) -> ConversionResult:
        """Tokenize *markdown* into blocks.

        Returns
        -------
        ConversionResult
            ``blocks`` may be empty under the ``placeholder`` policy; the
            page assembler substitutes the placeholder paragraph.

        Raises
        ------
        ExportConversionError
            When no blocks were produced and
            ``empty_document_policy`` is ``"raise"``.
        """
        blocks, warnings = tokenize(markdown, self._config)

        if not blocks and self._config.empty_document_policy == "raise":
            raise ExportConversionError(
                message="Markdown produced no Notion blocks",
                context={"markdown_chars": len(markdown)},
            )

        for warning in warnings:
            self._metrics.increment("conversion.warnings_total", tags={"code": warning.code})

        log.info(
            "markdown converted",
            extra={"extra_fields": {
                "op": "convert",
                "markdown_chars": len(markdown),
                "blocks": len(blocks),
                "warnings": len(warnings),
            }},
        )

        if self._config.debug_dump_payload:
            safe = redact({"blocks": blocks}, self._config.token)
            print(
                "[confluence2notion] Notion blocks payload:",
                json.dumps(safe["blocks"], indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        return ConversionResult(blocks=blocks, warnings=warnings)
