# app/utils/logger.py
"""
Centralised logging configuration for the whole intake service.
Logs to console and to a rotating file in /logs/.

Structured context passed through ``extra={...}`` (e.g. the degraded
attachment field and reason) is appended to the line as ``key=value`` pairs,
so upload problems can be grepped and reconciled later.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
os.makedirs(LOG_DIR, exist_ok=True)

# Attributes every LogRecord has; anything else came in through `extra`
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_configured = False


class ContextFormatter(logging.Formatter):
    """Formatter that renders `extra` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        return line


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = ContextFormatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)

    # Keeps last 10 × 5MB files
    file_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, "intake.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
