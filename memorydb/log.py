from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

LOGGER_NAME = "memorydb"
EXTRA_FIELDS = ("key_count", "removed", "interval_s", "sweeper_thread")

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # extras
        for k in EXTRA_FIELDS:
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a JSON stream handler to the memorydb logger.

    Opt-in: importing the package never installs handlers. The level falls
    back to ``LOG_LEVEL`` and then ``INFO``.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger
