"""Configure application logging using the Python standard library.

This module defines a function that sets up a root logger with both
console and rotating file handlers.  Logs are formatted as JSON and
include the timestamp, level, module and message, plus any vending
context (selection, quantity, amount) passed through ``extra``.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, UTC

_CONTEXT_FIELDS = ("selection", "quantity", "amount")


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            # Merge extra dict into top‑level (avoid nested 'extra')
            log_record.update(extra)
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_dir: str | None = None, level: int = logging.INFO) -> None:
    """Configure root logger with JSON formatting and rotating file handler.

    Args:
        log_dir: Directory where log files are written.  Defaults to
            ``VENDING_LOG_DIR`` or ``logs``; created if it does not exist.
        level: Logging level for the root logger.
    """
    log_dir = log_dir or os.environ.get("VENDING_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger()
    logger.setLevel(level)
    # Remove any default handlers (e.g. from basicConfig)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    formatter = JsonFormatter()
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, "vending_machine.log"),
        maxBytes=5 * 1024 * 1024,  # 5 MB per log file
        backupCount=3,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
