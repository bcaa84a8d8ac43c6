"""Split block lists into request-sized batches."""

from __future__ import annotations

from typing import Any

MAX_BLOCKS_PER_REQUEST = 100
"""Notion's ceiling for ``children`` in one create or append call."""


def chunk_children(
    blocks: list[dict[str, Any]],
    size: int = MAX_BLOCKS_PER_REQUEST,
) -> list[list[dict[str, Any]]]:
    """Partition *blocks* into consecutive batches of at most *size*.

    Parameters
    ----------
    blocks:
        Top-level block dicts, in upload order.
    size:
        Batch ceiling. Defaults to :data:`MAX_BLOCKS_PER_REQUEST`.

    Returns
    -------
    list[list[dict]]
        Batches whose concatenation is *blocks*. An empty input yields
        ``[]``, never ``[[]]``.

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(b) for b in chunk_children([{"type": "divider"}] * 150)]
    [100, 50]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    return [blocks[i : i + size] for i in range(0, len(blocks), size)]
