"""Parse Notion page ids out of ids and page URLs."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from confluence2notion.errors import ExportValidationError

_URL_ID_RE = re.compile(r"(?:-|^|/)([0-9a-f]{32})$", re.IGNORECASE)
_HEX32_RE = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)


def format_page_id(hex32: str) -> str:
    """Insert hyphens into a 32-digit hex id: ``8-4-4-4-12``."""
    h = hex32.lower()
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


def extract_page_id(value: str) -> str:
    """Normalise a page id or page URL to a dashed UUID.

    Accepted inputs are a bare 32-digit hex id (with or without hyphens)
    or an ``http(s)`` URL whose path ends in the id, optionally after a
    ``Title-`` slug as in ``https://www.notion.so/Team-Notes-<id>``.

    Parameters
    ----------
    value:
        User-supplied id or URL.

    Returns
    -------
    str
        The id in lower-case ``8-4-4-4-12`` form.

    Raises
    ------
    ExportValidationError
        If no 32-digit hex id can be found.

    Examples
    --------
    >>> extract_page_id("https://x.tld/Page-2dadca9a3fff80278295e23720dd2a53")
    '2dadca9a-3fff-8027-8295-e23720dd2a53'
    """
    raw = (value or "").strip()

    if raw.lower().startswith(("http://", "https://")):
        path = urlsplit(raw).path.rstrip("/")
        match = _URL_ID_RE.search(path)
        if match:
            return format_page_id(match.group(1))

    compact = raw.replace("-", "")
    if _HEX32_RE.match(compact):
        return format_page_id(compact)

    raise ExportValidationError(
        f"Invalid Notion page id or URL: {value!r}",
        context={"field": "parent_id", "value": value},
    )
