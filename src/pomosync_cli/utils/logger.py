"""Application-wide logger writing to platformdirs user_log_dir.

Everything goes to one rotating file; modules ask for a named child
(``get_logger("sync")``) so each line shows where it came from. The level
defaults to DEBUG and can be lowered with ``POMOSYNC_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "pomosync_cli"
_LOG_FILE = "pomosync.log"
_MAX_BYTES = 2 * 1024 * 1024  # 2 MB
_BACKUP_COUNT = 3
_LEVEL_ENV = "POMOSYNC_LOG_LEVEL"

_logger: logging.Logger | None = None


def _file_handler(log_dir: Path) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def _configured_level() -> int:
    level = logging.getLevelName(os.environ.get(_LEVEL_ENV, "DEBUG").upper())
    return level if isinstance(level, int) else logging.DEBUG


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, or its child *name*.

    The file handler is attached on first use.
    """
    global _logger
    if _logger is None:
        log_dir = Path(user_log_dir(_APP_NAME))
        log_dir.mkdir(parents=True, exist_ok=True)

        app_logger = logging.getLogger(_APP_NAME)
        app_logger.setLevel(_configured_level())
        if not any(
            isinstance(h, logging.handlers.RotatingFileHandler)
            for h in app_logger.handlers
        ):
            app_logger.addHandler(_file_handler(log_dir))
        app_logger.propagate = False
        _logger = app_logger

    return _logger.getChild(name) if name else _logger
