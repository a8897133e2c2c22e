"""JSON logging for the CLI and the HTTP server.

Engine modules attach ids and error kinds through `extra=`
(`instance_id`, `definition_id`, `action_id`, `kind`); the formatter nests
them under "extra" so each transition or rejection is one searchable line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Built-in LogRecord attributes; the rest are workflow ids passed via `extra=`.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, extra, exception."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send engine, server and uvicorn logs to stdout as JSON at `level`."""

    root = logging.getLogger()

    # `main()` may run several times in one process (tests, embedding).
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # One access line per request drowns out transition logs at DEBUG.
    logging.getLogger("uvicorn.access").setLevel(max(root.level, logging.INFO))
