"""Structured JSON logging.

Structured context goes through ``extra={"extra_fields": {...}}``. Log ids,
dates and amounts only; guest names and emails stay out of the logs.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from hotelbook.settings import load_settings


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_obj.update(record.extra_fields)

        return json.dumps(log_obj, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger configured for JSON output on stdout."""
    logger = logging.getLogger(name)

    # Only configure if no handlers (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        level = logging.getLevelName(load_settings().log_level)
        logger.setLevel(level if isinstance(level, int) else logging.INFO)
        logger.propagate = False

    return logger
