"""Structured JSON logging helpers for conduit."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging import Logger
from typing import Dict

_LOGGER_NAME = "conduit"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Event and dispatch context attached via extra=
        for key in ("event", "payload", "pipe", "position", "method"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str | None = None) -> Logger:
    """Return a module level logger configured for structured JSON output."""

    logger_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        # Honor LOG_LEVEL env, default INFO
        level = os.environ.get("LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
    return logger


def log_event(
    logger: Logger,
    event: str,
    payload: Dict[str, object] | None = None,
    *,
    level: int = logging.INFO,
) -> None:
    """Log an event payload in a consistent JSON format."""

    payload = payload or {}
    extra = {"event": event, "payload": payload}
    logger.log(level, f"event={event}", extra=extra)
