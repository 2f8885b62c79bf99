"""Logging configuration helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

# Extras the engine attaches to records via ``extra=``.
CONTEXT_FIELDS = ("user_id", "plan_id", "meal_id")

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s%(context)s"


def _context_of(record: logging.LogRecord) -> dict[str, str]:
    return {
        name: str(value)
        for name in CONTEXT_FIELDS
        if (value := getattr(record, name, None)) is not None
    }


class ContextFilter(logging.Filter):
    """Render context extras as a ``[key=value ...]`` suffix for plain output."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        context = _context_of(record)
        record.context = (
            " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"
            if context
            else ""
        )
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, context extras as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context_of(record))

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level_name: str, fmt: str) -> None:
    """Install a single plain or JSON handler on the root logger.

    Python warnings (claim shortfalls among them) are routed through the
    ``py.warnings`` logger so they share that handler.
    """

    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.addFilter(ContextFilter())
    if (fmt or "plain").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    logging.captureWarnings(True)


__all__ = ["CONTEXT_FIELDS", "ContextFilter", "JsonFormatter", "configure_logging"]
