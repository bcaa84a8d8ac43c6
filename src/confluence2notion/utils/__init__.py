from .chunk import MAX_BLOCKS_PER_REQUEST, chunk_children
from .page_id import extract_page_id
from .redact import redact
from .text_split import RICH_TEXT_LIMIT, split_string, utf16_len

__all__ = [
    "MAX_BLOCKS_PER_REQUEST",
    "RICH_TEXT_LIMIT",
    "chunk_children",
    "extract_page_id",
    "redact",
    "split_string",
    "utf16_len",
]
