import datetime
import json
import logging

from flourish_cache.config import settings


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Keyword fields passed through ``extra={"fields": {...}}`` are merged
    into the top level of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **getattr(record, "fields", {}),
        }
        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """Thin wrapper that turns keyword arguments into structured fields."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def _log(self, level: int, message: str, **kwargs) -> None:
        self.logger.log(level, message, extra={"fields": kwargs})

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, **kwargs)


_ROOT = "flourish_cache"
_configured = False


def configure_logging(level: str | None = None) -> None:
    """Attach the JSON handler to the package logger (idempotent)."""
    global _configured
    root = logging.getLogger(_ROOT)
    root.setLevel((level or settings.log_level).upper())
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger below the package namespace."""
    if not name.startswith(_ROOT):
        name = f"{_ROOT}.{name}"
    return StructuredLogger(logging.getLogger(name))
