# utils/logging.py
"""
Logging setup.

LOG_FORMAT=json emits one JSON object per line (timestamp, level, message,
module, func, line) for log aggregation; anything else uses a plain text format.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any

import config

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JSONFormatter(logging.Formatter):
     """Format log records as single-line JSON."""

     def format(self, record: logging.LogRecord) -> str:
          log_data: dict[str, Any] = {
               "timestamp": datetime.now(timezone.utc).isoformat(),
               "level": record.levelname,
               "logger": record.name,
               "message": record.getMessage(),
               "module": record.module,
               "func": record.funcName,
               "line": record.lineno,
          }
          if record.exc_info:
               log_data["exception"] = self.formatException(record.exc_info)
          return json.dumps(log_data)


def configure_logging(level: str = None, fmt: str = None) -> None:
     """Install a single stream handler on the root logger."""
     level = (level or config.LOG_LEVEL).upper()
     fmt = (fmt or config.LOG_FORMAT).lower()

     handler = logging.StreamHandler()
     if fmt == "json":
          handler.setFormatter(JSONFormatter())
     else:
          handler.setFormatter(logging.Formatter(TEXT_FORMAT))

     root = logging.getLogger()
     root.handlers.clear()
     root.addHandler(handler)
     root.setLevel(level)

     # The Stripe SDK logs request bodies at debug level
     logging.getLogger("stripe").setLevel(logging.WARNING)
