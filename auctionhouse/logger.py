"""Structured JSON logging for the service."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

LOGGER_NAME = "auctionhouse"

_LEVEL_NAMES = {"WARNING": "warn", "CRITICAL": "fatal"}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        millis = int(record.msecs)
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}" + moment.strftime("%z")

    def format(self, record: logging.LogRecord) -> str:
        level = _LEVEL_NAMES.get(record.levelname, record.levelname.lower())
        entry = {
            "level": level,
            "time": self.formatTime(record),
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "fields", {}) or {})
        return json.dumps(entry, default=str)


def _build_logger() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(logging.INFO)
    log.propagate = False
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        log.addHandler(handler)
    return log


_log = _build_logger()


def info(message: str, **kwargs) -> None:
    """Log an informational message with extra fields."""
    _log.info(message, extra={"fields": kwargs})


def error(message: str, err: BaseException | str | None, **kwargs) -> None:
    """Log an error message, attaching the error text under ``error``."""
    fields = dict(kwargs)
    fields["error"] = None if err is None else str(err)
    _log.error(message, extra={"fields": fields})