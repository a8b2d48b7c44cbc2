from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level_name: Optional[str] = None) -> None:
    """
    Route application logs to stdout at ``level_name`` (default INFO).

    Safe to call more than once: the console handler is installed only the
    first time, later calls just adjust the level.
    """
    global _configured
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(ch)
    _configured = True
    logging.getLogger(__name__).info("Logging initialized at %s", logging.getLevelName(level))
