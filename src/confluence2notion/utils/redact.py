"""Scrub secrets and bulky inline data before logging payloads.

Used for the ``debug_dump_payload`` output and for the request context
attached to log records:

* values under sensitive keys (``Authorization``, ``token``, ...) are
  masked, keeping only the last four characters of a known token;
* the integration token is removed from every string in the tree;
* ``data:`` URIs, which Confluence exports for pasted images, are
  collapsed to ``<data_uri:N_chars>``.
"""

from __future__ import annotations

import copy
import re
from typing import Any

_DATA_URI_RE = re.compile(r"data:[\w.+-]+/[\w.+-]+;base64,[A-Za-z0-9+/=]+")

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")

_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "authorization",
    "token",
    "secret",
    "password",
    "cookie",
    "api_key",
})


def _mask(value: str, token: str | None) -> str:
    if token and token in value:
        tail = token[-4:] if len(token) >= 8 else ""
        value = value.replace(token, f"<redacted:...{tail}>" if tail else "<redacted>")
    return _BEARER_RE.sub(r"\1<redacted>", value)


def _scrub(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        out: dict = {}
        for key, item in value.items():
            lowered = key.lower() if isinstance(key, str) else ""
            if any(s in lowered for s in _SENSITIVE_KEYS):
                out[key] = _mask(item, token) if isinstance(item, str) else "<redacted>"
            else:
                out[key] = _scrub(item, token)
        return out
    if isinstance(value, list):
        return [_scrub(item, token) for item in value]
    if isinstance(value, str):
        value = _DATA_URI_RE.sub(lambda m: f"<data_uri:{len(m.group(0))}_chars>", value)
        return _mask(value, token) if token else value
    return value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a scrubbed deep copy of *payload*.

    Parameters
    ----------
    payload:
        Request body or header mapping.
    token:
        The integration token, removed wherever it occurs.

    Examples
    --------
    >>> redact({"Authorization": "Bearer secret_abcdefgh"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _scrub(copy.deepcopy(payload), token)
