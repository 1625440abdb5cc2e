"""Structured JSON logger for retryafter.

Each record is a single-line JSON object.  A retry decision looks like::

    {"ts": "2026-10-18T12:00:00.123456+00:00", "level": "INFO",
     "logger": "retryafter.middleware", "message": "Honouring Retry-After",
     "op": "retry_after", "status_code": 429, "delay_s": 5.0, "attempt": 1}

Usage::

    from retryafter.observability import get_logger

    log = get_logger("retryafter.middleware")
    log.warning("Retry-After ignored", extra={"extra_fields": {"raw": "soon"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Anything passed as ``extra={"extra_fields": {...}}`` is
    merged into the top-level object; ``exc_info`` and ``stack_info`` are
    serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so repeated get_logger calls stay idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "retryafter",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"retryafter"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name such as
        ``"INFO"``.  Only applied the first time *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do not add duplicate handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # Avoid duplicate output when the root logger also has handlers.
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
