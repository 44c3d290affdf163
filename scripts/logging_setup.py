"""Process-wide logging configuration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

OUR_LOGGERS = ("tui", "taskform")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the terminal readable while the form is on screen:
    - our own loggers pass at the handler's level
    - third-party loggers (textual, asyncio, ...) only on ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if any(name == n or name.startswith(n + ".") for n in OUR_LOGGERS):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskform",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with:
    - Console handler on stderr, filtered and WARNING+ by default so the
      full-screen form is not interrupted
    - File handler: full logs for debugging

    Call this ONCE, very early. Returns the log file path.
    Raises OSError if the log directory or file cannot be created.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskform.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
