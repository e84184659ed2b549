"""Root logging setup for the ``pishock`` command line tool.

The library only creates loggers; handlers are installed here, once, by the
entry point.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_NAMES = ("critical", "error", "warning", "info", "debug")

_LOG_FILE_MAX_BYTES = 500 * 1024
_LOG_FILE_BACKUPS = 2


def configure_logging(
    level: str = "info",
    *,
    log_file: Optional[Union[str, Path]] = None,
    suppressed_loggers: Iterable[str] = (),
) -> None:
    """Replace the root handlers with a stdout handler and an optional rotating file.

    Args:
        level: One of ``LOG_LEVEL_NAMES``, case-insensitive. Anything else
            falls back to info with a warning.
        log_file: Rotating log file; parent directories are created.
        suppressed_loggers: Loggers limited to ERROR, e.g. ``aiohttp``.
    """
    name = level.lower()
    numeric_level = getattr(logging, name.upper()) if name in LOG_LEVEL_NAMES else logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=_LOG_FILE_MAX_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    for suppressed in suppressed_loggers:
        logging.getLogger(suppressed).setLevel(logging.ERROR)

    if name not in LOG_LEVEL_NAMES:
        logging.getLogger(__name__).warning("Unknown log level '%s', using info", level)


__all__ = ["configure_logging", "LOG_FORMAT", "LOG_DATEFMT", "LOG_LEVEL_NAMES"]
