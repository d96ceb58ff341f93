from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LEVEL_NAMES = list(_LEVELS)
_SHORT = {"warning": "warn", "critical": "crit"}


class BracketLevelFormatter(logging.Formatter):
    """Formatter with bracketed lowercase level tags and UTC timestamps."""

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def format(self, record):
        name = record.levelname.lower()
        record.level_tag = f"[{_SHORT.get(name, name)}]"
        return super().format(record)


def init_logging(level: Optional[str] = "warning", stream: Optional[TextIO] = None) -> None:
    """Configure the ``caatest`` logger with a single stderr handler.

    Unknown level names fall back to warning.
    """
    lvl = _LEVELS.get(str(level or "warning").lower(), logging.WARNING)

    logger = logging.getLogger("caatest")
    logger.setLevel(lvl)

    # Remove existing handlers to avoid duplicates
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(BracketLevelFormatter(fmt="%(asctime)s %(level_tag)s %(name)s: %(message)s"))
    logger.addHandler(handler)
