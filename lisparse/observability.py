"""
Logging setup for the lisparse command-line tools.

The library modules only create module loggers; nothing is configured
until setup_logging() runs at process startup.

Level resolution: explicit argument, else the LISPARSE_LOG environment
variable, else WARNING. Format: "text" (default) or "json", also
settable through LISPARSE_LOG_FORMAT.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

LOG_LEVEL_ENV = "LISPARSE_LOG"
LOG_FORMAT_ENV = "LISPARSE_LOG_FORMAT"
DEFAULT_LOG_LEVEL = "WARNING"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or the environment) to a logging level number."""
    name = level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
    return getattr(logging, name.upper(), logging.WARNING)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Handler:
    """Configure the root logger to write to stderr. Returns the handler."""
    fmt = fmt or os.environ.get(LOG_FORMAT_ENV, "text")
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(resolve_level(level))
    return handler
