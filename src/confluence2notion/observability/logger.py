"""JSON-lines logging for confluence2notion.

Each record is written as one JSON object per line so export runs can be
grepped or shipped to a log pipeline as-is::

    {"ts": "2026-03-02T09:15:04.120311+00:00", "level": "INFO",
     "logger": "confluence2notion.assembler", "message": "page created",
     "page_id": "1a2b...", "blocks_total": 142}

Structured fields are attached with ``extra={"extra_fields": {...}}``::

    log = get_logger("confluence2notion.assembler")
    log.info("page created", extra={"extra_fields": {"page_id": pid}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "confluence2notion"


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single JSON line.

    Always present: ``ts`` (UTC, ISO-8601), ``level``, ``logger`` and
    ``message``. The record's ``extra_fields`` dict, if any, is merged in
    at the top level. Exceptions and stack info are included as text.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if fields:
            entry.update(fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


# Names that already carry our handler; get_logger stays idempotent.
_configured: set[str] = set()


def get_logger(
    name: str = ROOT_LOGGER,
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Return a logger writing JSON lines.

    Parameters
    ----------
    name:
        Logger name, normally ``"confluence2notion.<module>"``.
    level:
        Minimum level, as an ``int`` or a level name such as ``"DEBUG"``.
        Only applied the first time a name is configured.
    stream:
        Destination stream; ``sys.stderr`` by default.

    Returns
    -------
    logging.Logger
        The configured logger. Calling again with the same *name* returns
        the same object without stacking another handler.
    """
    logger = logging.getLogger(name)
    if name in _configured:
        return logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured.add(name)
    return logger
