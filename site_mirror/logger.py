# site_mirror/logger.py
"""
Project logger.

Crawl events go to the ``SiteMirror`` logger as ``[DOWNLOADING]``, ``[SAVED]``
and ``[ERROR]`` lines. Nothing is attached at import time; the CLI calls
:func:`init_logging` once before a run.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteMirror"

#: rotation of the optional log file
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Send mirror logs to stdout and, when *log_file* is given, to a rotating file.

    Calling it again replaces the handlers of the previous call.
    """
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    mirror_logger = logging.getLogger(LOGGER_NAME)
    for old in list(mirror_logger.handlers):
        mirror_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        mirror_logger.addHandler(handler)
    mirror_logger.setLevel(level)
    mirror_logger.propagate = False
    return mirror_logger


logger: logging.Logger = logging.getLogger(LOGGER_NAME)

__all__ = ["logger", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
