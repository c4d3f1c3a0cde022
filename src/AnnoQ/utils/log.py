"""AnnoQ logging utilities.

All modules log through the ``AnnoQ`` package logger. Library users get the
standard ``logging`` behavior (nothing is printed unless they configure it);
the CLI calls ``configure_logging`` once per command.

Line format: ``mm-dd HH:MM:SS [LVL] message`` with LVL in DEBG/INFO/WARN/ERRO.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(message)s"
_DATE_FORMAT: Final = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("AnnoQ")


def resolve_level(level: str | None) -> int:
    """Map a level name to its ``logging`` constant, defaulting to INFO."""
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    # stderr, so records on stdout stay pipeable
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(log_dir: str, action: str, formatter: logging.Formatter) -> logging.Handler:
    action_dir = Path(log_dir or "log") / action
    action_dir.mkdir(parents=True, exist_ok=True)
    log_path = action_dir / f"{action}_{datetime.now().strftime('%m%d%H%M%S')}.log"
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """Install handlers on the AnnoQ logger, replacing any previous ones.

    Args:
        level: Console level name (e.g. INFO, DEBUG).
        action: CLI command name; names the per-command log directory.
        log_to_file: Also write a DEBUG-level log file under ``log_dir/action``.
        log_dir: Base directory for log files.
    """
    console_level = resolve_level(level)
    formatter = _AbbrevLevelFormatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    handlers = [_console_handler(console_level, formatter)]
    if log_to_file and action:
        handlers.append(_file_handler(log_dir, action, formatter))

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    # file handler wants DEBUG even when the console is quieter
    log.setLevel(logging.DEBUG if len(handlers) > 1 else console_level)
    log.propagate = False
