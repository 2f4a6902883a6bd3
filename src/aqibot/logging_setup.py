"""
JSON log lines for the server and the channel job.

Each record becomes one JSON object on stdout. Request context passed through
``extra=`` (user id, resolved command, response mode, reject reason) is lifted
into top-level keys so log queries can filter on it.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# Fields callers attach with logger.info(..., extra={...})
CONTEXT_FIELDS = ("user_id", "command", "mode", "reason")

# Chatty third-party loggers kept at WARNING unless the root level is DEBUG
QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """Formats a LogRecord as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = str(value)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True)


def configure_logging(level: str = "INFO") -> None:
    """
    Route all logging to stdout as JSON.

    Args:
        level: Root level name, e.g. "INFO" or "debug"
    """
    level = level.upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    if root.level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
