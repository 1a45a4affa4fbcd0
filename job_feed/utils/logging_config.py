"""Logging for the CLI and the API server.

Everything under the `job_feed` logger goes to a rotating file in the
configured log directory and to stderr; stdout is left to command output
such as `feed --json`.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOGGER_NAME = "job_feed"
LOG_FILE = "job_feed.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP and API client libraries log every request at INFO
QUIET_LOGGERS = ("httpx", "openai", "urllib3")

# Marks handlers installed here, so a second call replaces only those
_HANDLER_FLAG = "_job_feed_handler"


def resolve_level(level: Union[str, int], default: int = logging.INFO) -> int:
    """Level name ("debug", "INFO") or number -> logging level; unknown names give `default`."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else default


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_FLAG, True)
    logger.addHandler(handler)


def setup_logging(log_dir: str = "logs", level: Union[str, int] = "INFO") -> logging.Logger:
    """Configure the `job_feed` logger. Safe to call more than once.

    A repeated call (the CLI, then the app factory under `serve`) closes and
    replaces the handlers added by the previous one and leaves any other
    handlers, such as pytest's capture, in place.
    """
    numeric_level = resolve_level(level)
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    # 5MB per file, keep 3 backups
    _install(
        logger,
        RotatingFileHandler(log_path / LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"),
        numeric_level,
    )
    _install(logger, logging.StreamHandler(sys.stderr), numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return logger
