# src/todo_client/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Console thresholds by logger prefix; the longest matching prefix wins.
# Request-level chatter from the API client belongs in the file log only.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "todo_client": logging.NOTSET,
    "todo_client.api": logging.WARNING,
    "py.warnings": logging.ERROR,
}
_THIRD_PARTY_THRESHOLD = logging.ERROR


def _console_threshold(name: str) -> int:
    best: str | None = None
    for prefix in _CONSOLE_THRESHOLDS:
        if name == prefix or name.startswith(prefix + "."):
            if best is None or len(prefix) > len(best):
                best = prefix
    return _CONSOLE_THRESHOLDS[best] if best is not None else _THIRD_PARTY_THRESHOLD


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the interactive prompt readable: our logs pass, everything else needs ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_threshold(record.name)


def _handler(handler: logging.Handler, level: int, *filters: logging.Filter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    for f in filters:
        handler.addFilter(f)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to stderr (filtered) and to <log_dir>/todo.log (full).

    Replaces any handlers already on the root logger. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(_handler(logging.StreamHandler(sys.stderr), console_level, _ConsoleNoiseFilter()))
    root.addHandler(_handler(logging.FileHandler(str(log_file), encoding="utf-8"), file_level))

    logging.captureWarnings(True)
    return log_file
