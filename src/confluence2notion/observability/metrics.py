"""Pluggable metrics for confluence2notion.

The package reports counters and timings through any object satisfying
:class:`MetricsHook`; :class:`NoopMetricsHook` is used when none is
configured. Metric names:

* ``notion_api.requests_total``        -- counter, tagged by method/status
* ``notion_api.request_duration_ms``   -- timing
* ``notion_api.rate_limit_wait_ms``    -- timing, client-side pacing
* ``notion_api.rate_limited_total``    -- counter, HTTP 429 answers
* ``blocks.created_total``             -- counter
* ``conversion.warnings_total``        -- counter, tagged by code
* ``page_export.duration_ms``          -- timing, whole upload
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Interface a metrics backend (StatsD, Prometheus, ...) must provide.

    ``tags`` are string key/value pairs; backends map them onto their own
    labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Add *value* to the counter *name*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set the gauge *name* to *value*."""
        ...


class NoopMetricsHook:
    """Discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
