"""confluence2notion.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.rate_limit` -- async token bucket.
* :mod:`.transport` -- HTTP transport with auth, pacing and error mapping.
* :mod:`.pages` -- page creation.
* :mod:`.blocks` -- appending children.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, extract_block_ids
from .pages import AsyncPageAPI, title_properties
from .rate_limit import AsyncTokenBucket
from .transport import AsyncNotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncTokenBucket",
    "extract_block_ids",
    "title_properties",
]
