"""Runtime configuration for confluence2notion.

:class:`ExportConfig` holds every tunable of the export pipeline. It is
passed to the converters, the HTTP transport, the page assembler and the
:class:`~confluence2notion.async_client.AsyncExportClient` facade.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urlparse

NOTION_API_VERSION = "2022-06-28"
"""``Notion-Version`` header value the block payloads are written against."""

PLACEHOLDER_TEXT = "(Content could not be converted)"

SOURCE_CALLOUT_PREFIX = "Imported from Confluence: "


@dataclass
class ExportConfig:
    """Complete configuration for an export run.

    Only ``token`` is needed to talk to Notion; the converters can be
    used with a token-less config.

    Parameters
    ----------
    token:
        Notion integration token. Never logged.
    notion_version:
        Value of the ``Notion-Version`` header.
    base_url:
        API root URL. Override for proxies or local test servers.
    heading_overflow:
        What to do with ``####``-``######`` headings (Notion only has
        three heading levels).

        * ``"downgrade"`` -- clamp to ``heading_3``.
        * ``"paragraph"`` -- emit a bold paragraph.
    strip_numbering_artifacts:
        Remove duplicated auto-numbering prefixes (``11、``, ``2.1.``)
        that Confluence leaves in list item text.
    empty_document_policy:
        Behaviour when the Markdown yields no blocks at all.

        * ``"placeholder"`` -- emit one paragraph with ``placeholder_text``.
        * ``"raise"`` -- raise :class:`ExportConversionError`.
    placeholder_text:
        Text of the placeholder paragraph.
    source_callout_prefix:
        Text shown before the source link in the provenance callout.
    image_base_url:
        Base URL that relative ``<img src>`` and ``<a href>`` values are
        resolved against during HTML conversion.
    rate_limit_rps:
        Client-side request pacing (token bucket). Notion documents an
        average of three requests per second per integration.
    timeout_seconds:
        HTTP timeout applied to every request.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Object satisfying :class:`~confluence2notion.observability.MetricsHook`.
    debug_dump_markdown:
        Write the intermediate Markdown to *stderr* on HTML conversion.
    debug_dump_payload:
        Write the redacted block payloads to *stderr*.
    """

    # ── Notion API ──────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = NOTION_API_VERSION

    base_url: str = "https://api.notion.com/v1"

    # ── Conversion ──────────────────────────────────────────────────────
    heading_overflow: Literal["downgrade", "paragraph"] = "downgrade"

    strip_numbering_artifacts: bool = True

    empty_document_policy: Literal["placeholder", "raise"] = "placeholder"

    placeholder_text: str = PLACEHOLDER_TEXT

    source_callout_prefix: str = SOURCE_CALLOUT_PREFIX

    image_base_url: str | None = None

    # ── HTTP ────────────────────────────────────────────────────────────
    rate_limit_rps: float = 3.0

    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_markdown: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses plain HTTP for non-local host '{parsed.hostname}'; "
                "the integration token would be sent in clear text"
            )
        if self.heading_overflow not in ("downgrade", "paragraph"):
            raise ValueError(
                f"heading_overflow must be 'downgrade' or 'paragraph', got {self.heading_overflow!r}"
            )
        if self.empty_document_policy not in ("placeholder", "raise"):
            raise ValueError(
                "empty_document_policy must be 'placeholder' or 'raise', "
                f"got {self.empty_document_policy!r}"
            )
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if not self.placeholder_text.strip():
            raise ValueError("placeholder_text must not be blank")

    def __repr__(self) -> str:
        """Show at most the last four characters of the token."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 8 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ExportConfig({', '.join(parts)})"
