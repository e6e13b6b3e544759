"""Structured JSON logger for gdocify.

Each record is written as one JSON object per line so conversion and
API activity can be shipped straight into a log pipeline::

    {"ts": "2026-01-05T09:14:02.511201+00:00", "level": "INFO",
     "logger": "gdocify.client", "message": "document created",
     "op": "create_document_from_markdown", "document_id": "1AbC", "operations": 42}

Usage::

    from gdocify.observability import get_logger, log_fields

    log = get_logger("gdocify.converter")
    log.info("conversion complete", extra=log_fields(op="convert", blocks=12))
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "gdocify"


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single-line JSON object.

    Guaranteed keys are ``ts`` (UTC ISO-8601), ``level``, ``logger`` and
    ``message``.  Fields passed through ``extra={"extra_fields": {...}}``
    (see :func:`log_fields`) are merged at the top level; they never
    overwrite the guaranteed keys.  ``exception`` and ``stack_info`` are
    added when the record carries them.
    """

    _RESERVED = frozenset({"ts", "level", "logger", "message"})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            for key, value in extra_fields.items():
                if key not in self._RESERVED:
                    entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def log_fields(**fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call."""
    return {"extra_fields": fields}


_configured: set[str] = set()


def get_logger(
    name: str = ROOT_LOGGER,
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Return a logger that writes structured JSON.

    Only the ``"gdocify"`` root logger gets a handler; child loggers such
    as ``"gdocify.transport"`` propagate to it, so configuring the root
    once is enough.  Calling with the same *name* again returns the same
    logger without adding handlers.

    Parameters
    ----------
    name:
        Logger name.  Names outside the ``gdocify`` hierarchy receive
        their own handler.
    level:
        Level for a newly configured handler-owning logger.  Accepts an
        ``int`` or a case-insensitive level name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    logger = logging.getLogger(name)
    is_child = name.startswith(ROOT_LOGGER + ".")
    owner = ROOT_LOGGER if is_child else name

    if owner not in _configured:
        owner_logger = logging.getLogger(owner)
        resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        owner_logger.setLevel(resolved)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        owner_logger.addHandler(handler)
        owner_logger.propagate = False

        _configured.add(owner)

    return logger
