"""Page API wrapper for the Notion ``/pages`` endpoint.

:class:`AsyncPageAPI` is a thin layer over the transport, which owns
auth, pacing and error mapping.
"""

from __future__ import annotations

from typing import Any

from confluence2notion.converter.inline import plain_runs, rich_text

from .transport import AsyncNotionTransport


def title_properties(title: str) -> dict[str, Any]:
    """``properties`` for a page under another page: just the title.

    Titles longer than one rich-text run are split across several.
    """
    return {"title": {"title": rich_text(plain_runs(title))}}


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(
        self,
        parent: dict[str, Any],
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a new page.

        Parameters
        ----------
        parent:
            Parent object, e.g. ``{"page_id": "..."}``.
        properties:
            Page properties; see :func:`title_properties`.
        children:
            Initial page content. Notion accepts at most 100 blocks here;
            the rest must be appended with
            :meth:`AsyncBlockAPI.append_children`.

        Returns
        -------
        dict
            The created page object, including ``id`` and ``url``.
        """
        body: dict[str, Any] = {
            "parent": parent,
            "properties": properties,
        }
        if children is not None:
            body["children"] = children
        return await self._transport.request("POST", "/pages", json=body)
