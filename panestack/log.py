"""File logging setup.

The terminal belongs to the UI while the program runs, so records go to a
rotating file under the platform log directory and never to stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-20s - %(message)s"
MAX_BYTES = 1024 * 1024
BACKUP_COUNT = 3


def setup_logging(path: Path | None = None, level: str = "INFO") -> logging.Handler:
    """Attach a rotating file handler to the ``panestack`` logger and return it."""
    level_value = getattr(logging, level.upper(), None)
    if not isinstance(level_value, int):
        raise ValueError(f"unknown log level: {level}")

    log_path = path or DEFAULT_LOG_PATH
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level_value)
    logger.addHandler(handler)
    logger.propagate = False
    return handler
