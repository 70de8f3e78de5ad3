"""Console logging for the CLI and the proxy.

Every module logs through ``logging.getLogger(__name__)``; the entry points
call setup_logging() once with the configured LOG_LEVEL.
"""

import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("urllib3", "werkzeug")

_LEVEL_COLORS = {
    logging.DEBUG: "36",
    logging.INFO: "32",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "35",
}


class LevelColorFormatter(logging.Formatter):
    """Formatter that wraps the level name in an ANSI color."""

    def format(self, record: logging.LogRecord) -> str:
        code = _LEVEL_COLORS.get(record.levelno)
        if code is None:
            return super().format(record)
        # Format a copy; other handlers share the record
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"\033[1;{code}m{record.levelname}\033[0m"
        return super().format(colored)


def resolve_level(level: Union[int, str]) -> int:
    """Accept a logging level number or name (any case)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Send all records at level or above to stream (stdout by default)."""
    stream = stream or sys.stdout
    level = resolve_level(level)

    is_tty = hasattr(stream, "isatty") and stream.isatty()
    formatter_cls = LevelColorFormatter if is_tty else logging.Formatter

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
