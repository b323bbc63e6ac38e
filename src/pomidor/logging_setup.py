from __future__ import annotations

"""Rotating JSON log file plus a terse console handler."""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "pomidor.log"
EXTRA_PREFIX = "_json_"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith(EXTRA_PREFIX):
                payload[k[len(EXTRA_PREFIX):]] = v
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(base_dir: Path, level: int = logging.INFO, *, console: bool = True) -> Path:
    log_dir = base_dir / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE_BASENAME
    root = logging.getLogger()
    root.setLevel(level)
    # Clear existing handlers (avoid duplicates when called twice)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    handler = RotatingFileHandler(logfile, maxBytes=512_000, backupCount=5, encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    if console:
        ch = logging.StreamHandler()
        ch.setLevel(logging.WARNING)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(ch)
    logging.getLogger(__name__).info("logging initialised", extra={"_json_phase": "startup"})
    return logfile


__all__ = ["configure_logging", "JsonFormatter"]
