"""
kvcache - Structured Logging

Configures the package logger with plain-text or JSON output.
Modules log through logging.getLogger(__name__) and pass context via `extra`.
"""

import json
import logging
from datetime import UTC, datetime

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON object."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """
    Configure the kvcache package logger.

    Existing handlers on the package logger are replaced, so calling this
    again switches level or format.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        json_format: Emit JSON records instead of plain text

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("kvcache")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    return logger


def configure_from_config() -> logging.Logger:
    """Configure logging from the global kvcache configuration."""
    from ..config import LogFormat, get_config

    config = get_config()
    return setup_logging(level=config.log_level, json_format=config.log_format == LogFormat.JSON)
