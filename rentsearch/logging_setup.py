"""
Logging configuration for scripts that use rentsearch.
The library itself only creates loggers; handlers are installed here.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import get_config


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the rentsearch logger (idempotent)."""
    config = get_config().search
    level = (level or config.log_level).upper()
    fmt = fmt or config.log_format

    logger = logging.getLogger("rentsearch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
