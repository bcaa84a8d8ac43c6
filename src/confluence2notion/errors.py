"""Error hierarchy for confluence2notion.

Every error raised by the package inherits from :class:`ExportError`. An
error carries a machine-readable ``code`` from :class:`ErrorCode`, a
human-readable ``message``, a structured ``context`` dict and, when it
wraps a lower-level failure, a ``cause`` that is also chained as
``__cause__``.

The export core never retries. Rate limits, timeouts and transport
failures surface to the caller immediately so that it can decide what to
do with a half-finished upload.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable codes for every error the package can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    API_ERROR = "API_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    PARTIAL_UPLOAD = "PARTIAL_UPLOAD"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ExportError(Exception):
    """Base exception for all confluence2notion errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` identifying the error category.
    message:
        Description of what went wrong. For API errors this includes the
        message returned by Notion, unmodified.
    context:
        Structured diagnostic data. Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: BaseException | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(ExportError):
    """Shared constructor for subclasses bound to a single error code."""

    error_code: ErrorCode = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            code=self.error_code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

class ExportValidationError(_CodedError):
    """A required field is missing or malformed, or Notion answered 400.

    Raised before any network call for a missing token, title or
    Markdown body and for an unparseable parent page id.

    Context keys: ``field``, ``value``, ``status_code``, ``notion_code``.
    """

    error_code = ErrorCode.VALIDATION_ERROR


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class ExportAuthError(_CodedError):
    """Notion API returned 401: the integration token is invalid or revoked.

    Context keys: ``status_code``, ``notion_code``.
    """

    error_code = ErrorCode.AUTH_ERROR


class ExportPermissionError(_CodedError):
    """The parent page is not shared with the integration.

    Notion answers 403, or 404 ``object_not_found`` when the integration
    cannot see the page at all.

    Context keys: ``status_code``, ``notion_code``, ``operation``.
    """

    error_code = ErrorCode.PERMISSION_ERROR


class ExportRateLimitError(_CodedError):
    """Notion API returned 429.

    Context keys: ``retry_after_seconds`` (``None`` when the header is
    absent or unparseable).
    """

    error_code = ErrorCode.RATE_LIMITED


class ExportNetworkError(_CodedError):
    """The request never produced an HTTP response.

    Context keys: ``method``, ``path``.
    """

    error_code = ErrorCode.NETWORK_ERROR


class ExportTimeoutError(ExportNetworkError):
    """The request exceeded ``timeout_seconds``."""

    error_code = ErrorCode.TIMEOUT


class ExportAPIError(_CodedError):
    """Any other non-2xx answer from Notion (5xx, 409, ...).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    error_code = ErrorCode.API_ERROR


# ---------------------------------------------------------------------------
# Conversion / assembly errors
# ---------------------------------------------------------------------------

class ExportConversionError(_CodedError):
    """Markdown produced no blocks and the empty-document policy is ``raise``.

    With the default ``placeholder`` policy this error is never raised;
    the converter emits a placeholder paragraph instead.
    """

    error_code = ErrorCode.CONVERSION_ERROR


class PartialUploadError(_CodedError):
    """An append batch failed after the page had already been created.

    The page exists in Notion with only part of its content. The original
    failure is available as ``cause`` / ``__cause__``.

    Context keys: ``page_id``, ``page_url``, ``blocks_sent``,
    ``blocks_total``.
    """

    error_code = ErrorCode.PARTIAL_UPLOAD

    @property
    def page_id(self) -> str:
        return self.context.get("page_id", "")

    @property
    def page_url(self) -> str:
        return self.context.get("page_url", "")
