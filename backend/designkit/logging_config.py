"""Logging setup for designkit entry points.

Library modules only do ``logging.getLogger(__name__)``; handlers are
attached here, once per named logger, by whoever drives a publish run.

Environment:
    LOG_DIR    directory for log files (default: backend/logs)
    LOG_LEVEL  level name for configured loggers (default: INFO)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).parent.parent / "logs")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

FILE_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
CONSOLE_FORMAT = "%(asctime)s [%(name)s] %(message)s"

_configured_loggers: set[str] = set()


def _level(level: Optional[str]) -> int:
    value = logging.getLevelName((level or LOG_LEVEL).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logger(
    name: str,
    filename: Optional[str] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Attach a console handler (and a file handler under LOG_DIR) to ``name``.

    Args:
        name: Logger name (e.g., 'publish')
        filename: Log file name (e.g., 'publish.log'); None for console only
        level: Level name; defaults to LOG_LEVEL

    Returns:
        The configured logger. Later calls with the same name return it
        unchanged.
    """
    logger = logging.getLogger(name)
    if name in _configured_loggers:
        return logger

    resolved = _level(level)
    logger.setLevel(resolved)
    logger.propagate = False

    handlers: list[logging.Handler] = []
    if filename:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(LOG_DIR / filename, encoding="utf-8")
        fh.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(fh)
    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers.append(sh)

    for handler in handlers:
        handler.setLevel(resolved)
        logger.addHandler(handler)

    _configured_loggers.add(name)
    return logger


def get_bundle_logger() -> logging.Logger:
    """Logger for bundle publishing (compile + sink hand-off)."""
    return setup_logger("publish", "publish.log")
