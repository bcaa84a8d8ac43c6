"""Async HTTP transport for the Notion API.

One request goes through these steps:

1. Acquire a token-bucket slot (await if needed).
2. Send the request with the auth and version headers.
3. On ``2xx``, return the parsed JSON body.
4. On anything else, raise the matching :class:`ExportError` subclass.

There is no retry loop. A 429 surfaces as :class:`ExportRateLimitError`
carrying the ``Retry-After`` value so the caller can decide what to do.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any, NoReturn

import httpx

from confluence2notion.config import ExportConfig
from confluence2notion.errors import (
    ExportAPIError,
    ExportAuthError,
    ExportNetworkError,
    ExportPermissionError,
    ExportRateLimitError,
    ExportTimeoutError,
    ExportValidationError,
)
from confluence2notion.observability import NoopMetricsHook, get_logger
from confluence2notion.utils.redact import redact

from .rate_limit import AsyncTokenBucket

log = get_logger("confluence2notion.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> NoReturn:
    """Raise the :class:`ExportError` subclass matching a non-2xx response."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")

    if status == 400:
        raise ExportValidationError(
            message=f"Validation error on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code, "body": body},
        )
    if status == 401:
        raise ExportAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code},
        )
    if status in (403, 404):
        raise ExportPermissionError(
            message=(
                f"Permission denied on {method} {path}: {notion_message}. "
                "Share the parent page with the integration."
            ),
            context={
                "status_code": status,
                "notion_code": notion_code,
                "operation": f"{method} {path}",
            },
        )
    if status == 429:
        retry_after = _parse_retry_after(response)
        raise ExportRateLimitError(
            message=f"Rate limited on {method} {path}",
            context={"status_code": status, "retry_after_seconds": retry_after},
        )
    raise ExportAPIError(
        message=f"Notion API error {status} on {method} {path}: {notion_message}",
        context={"status_code": status, "notion_code": notion_code, "body": body},
    )


def _dump_payload(
    method: str,
    url: str,
    payload: Any | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str, ensure_ascii=False),
        file=sys.stderr,
    )


def _emit_debug_dump(
    config: ExportConfig,
    method: str,
    response: httpx.Response,
    json_payload: Any,
) -> None:
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    _dump_payload(
        method, str(response.url), json_payload,
        response.status_code, resp_body,
        token=config.token,
    )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth headers and rate limiting.

    Parameters
    ----------
    config:
        An :class:`ExportConfig` providing the token, API version, base
        URL, timeout, proxy, pacing rate and metrics hook.
    """

    def __init__(self, config: ExportConfig) -> None:
        self._config = config
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=proxy,
        )

    # -- public API --------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute one HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``, ...).
        path:
            API path relative to ``base_url`` (e.g. ``/pages``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request`.

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for an empty body).

        Raises
        ------
        ExportValidationError
            On 400.
        ExportAuthError
            On 401.
        ExportPermissionError
            On 403 and 404.
        ExportRateLimitError
            On 429.
        ExportAPIError
            On any other non-2xx status.
        ExportTimeoutError
            When the request times out.
        ExportNetworkError
            When no response was received.
        """
        json_payload = kwargs.get("json")

        wait = await self._bucket.acquire()
        if wait > 0:
            self._metrics.timing(
                "notion_api.rate_limit_wait_ms",
                wait * 1000,
                tags={"method": method, "path": path},
            )

        t0 = time.monotonic()
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            self._record_failure(method, path, exc)
            raise ExportTimeoutError(
                message=f"Timed out after {self._config.timeout_seconds}s on {method} {path}",
                context={"method": method, "path": path},
                cause=exc,
            ) from exc
        except httpx.TransportError as exc:
            self._record_failure(method, path, exc)
            raise ExportNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"method": method, "path": path},
                cause=exc,
            ) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        status_tag = str(response.status_code)
        self._metrics.increment(
            "notion_api.requests_total",
            tags={"method": method, "path": path, "status": status_tag},
        )
        self._metrics.timing(
            "notion_api.request_duration_ms",
            elapsed_ms,
            tags={"method": method, "path": path, "status": status_tag},
        )

        _emit_debug_dump(self._config, method, response, json_payload)

        if 200 <= response.status_code < 300:
            if response.status_code == 204 or not response.content:
                return {}
            try:
                result = response.json()
            except ValueError as exc:
                raise ExportAPIError(
                    message=f"Notion returned a non-JSON body on {method} {path}",
                    context={
                        "status_code": response.status_code,
                        "body": response.text[:500],
                    },
                    cause=exc,
                ) from exc
            if not isinstance(result, dict):
                raise ExportAPIError(
                    message=f"Notion returned a non-object JSON body on {method} {path}",
                    context={"status_code": response.status_code, "body": result},
                )
            return result

        if response.status_code == 429:
            self._metrics.increment(
                "notion_api.rate_limited_total",
                tags={"method": method, "path": path},
            )
            log.warning(
                "Rate limited by Notion API",
                extra={"extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "status_code": 429,
                    "retry_after": _parse_retry_after(response),
                }},
            )
        else:
            log.warning(
                "Notion API request failed",
                extra={"extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round(elapsed_ms, 1),
                }},
            )
        _raise_for_status(response, method, path)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    def _record_failure(self, method: str, path: str, exc: Exception) -> None:
        self._metrics.increment(
            "notion_api.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={"extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "error": str(exc),
                "error_type": type(exc).__name__,
            }},
        )
