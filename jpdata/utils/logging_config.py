"""Logging configuration.

Plain text output for interactive use, or one JSON object per line when
``json_format`` is set. Structured fields passed through ``extra=`` are
included in JSON output.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Attributes every LogRecord has; anything else came in through extra=
RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {k: v for k, v in vars(record).items() if k not in RESERVED_ATTRS}
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure the root logger with a single stderr handler.

    Args:
        level: Log level name
        json_format: Emit JSON lines instead of plain text

    Returns:
        The root logger
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the jpdata namespace."""
    return logging.getLogger(f"jpdata.{name}")
