"""Centralized logging setup: colored console output on stderr.

Call ``setup_logging()`` once at startup.  All modules use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import sys

CONSOLE_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FMT = "%H:%M:%S"
LEVEL_ENV_VAR = "SNOUTY_LOG_LEVEL"

logger = logging.getLogger(__name__)

_ANSI = {
    "DEBUG": "\x1b[36m",
    "INFO": "\x1b[32m",
    "WARNING": "\x1b[33m",
    "ERROR": "\x1b[31m",
    "CRITICAL": "\x1b[35m",
}
_RESET = "\x1b[0m"


class _ColorFormatter(logging.Formatter):
    """ANSI-colored level names for terminal output."""

    def __init__(self, fmt: str, datefmt: str | None = None, use_color: bool = True) -> None:
        super().__init__(fmt, datefmt)
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        if self._use_color:
            color = _ANSI.get(original, "")
            record.levelname = f"{color}{original:<8}{_RESET}"
        else:
            record.levelname = f"{original:<8}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _level_from_env(default: int) -> int:
    raw = (os.environ.get(LEVEL_ENV_VAR) or "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.WARNING, verbose: bool = False) -> None:
    """Configure the root logger with a single stderr handler.

    Args:
        level: Minimum log level when neither ``verbose`` nor ``SNOUTY_LOG_LEVEL`` is set.
        verbose: If True, sets DEBUG level.
    """
    level = logging.DEBUG if verbose else _level_from_env(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if sys.stderr is not None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        console_handler.setFormatter(_ColorFormatter(CONSOLE_FMT, datefmt=DATE_FMT, use_color=use_color))
        root.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.debug("Logging initialized (level=%s)", logging.getLevelName(level))
