"""Block API wrapper for the Notion ``/blocks/{id}/children`` endpoint."""

from __future__ import annotations

from typing import Any

from confluence2notion.utils.chunk import chunk_children

from .transport import AsyncNotionTransport


def extract_block_ids(response: dict[str, Any]) -> list[str]:
    """``id`` of each block in an ``append_children`` response."""
    results = response.get("results", [])
    return [r["id"] for r in results if "id" in r]


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def append_children(
        self,
        block_id: str,
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Append child blocks to the end of a page or block.

        Lists longer than 100 blocks are sent as consecutive requests of
        at most 100, in order.

        Parameters
        ----------
        block_id:
            Id of the parent page or block.
        children:
            Block objects to append.

        Returns
        -------
        dict
            The last API response, with ``results`` holding the blocks
            appended by every request.
        """
        path = f"/blocks/{block_id}/children"
        response: dict[str, Any] = {}
        results: list[dict[str, Any]] = []
        for batch in chunk_children(children) or [children]:
            response = await self._transport.request("PATCH", path, json={"children": batch})
            results.extend(response.get("results", []))
        return {**response, "results": results}
