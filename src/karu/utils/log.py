"""
Logging setup for Karu.

The TUI owns the terminal, so log records go to a rotating file.

Modified: 2025-11-12
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from karu.config.settings import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 2


def setup_logging(settings: Settings) -> Optional[Path]:
    """
    Configure the ``karu`` logger from settings.

    Args:
        settings: Loaded settings

    Returns:
        Path of the log file, or None if it could not be opened
    """
    logger = logging.getLogger("karu")
    level = getattr(logging, settings.logging.level.upper(), logging.WARNING)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_karu_handler", False):
            logger.removeHandler(handler)
            handler.close()

    log_path = Path(settings.logging.file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_path, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        # Unwritable location: stay quiet rather than draw over the TUI
        null_handler = logging.NullHandler()
        null_handler._karu_handler = True  # type: ignore[attr-defined]
        logger.addHandler(null_handler)
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._karu_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return log_path
