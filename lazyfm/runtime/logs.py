"""Logging setup.

The terminal belongs to the UI while the app runs, so log records only ever
go to a file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path(user_log_dir("lazyfm", appauthor=False)) / "lazyfm.log"


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> Path | None:
    """Attach a file handler to the ``lazyfm`` logger and return its path.

    Returns ``None`` when the log file cannot be opened; logging then stays
    unconfigured rather than spilling onto the terminal.
    """
    target = log_file if log_file is not None else DEFAULT_LOG_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("lazyfm")
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
    return target
