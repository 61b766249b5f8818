"""Package logger.

Importing pairstore installs no handlers and writes no files; records
propagate to whatever the host application configured. Standalone tools call
:func:`configure_logging` once to get stderr output and, when
``settings.log_file`` is set, a rotating log file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pairstore.config.settings import Settings, settings as default_settings


MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("pairstore")
logger.addHandler(logging.NullHandler())

_installed: list[logging.Handler] = []


def _normalize_level(raw: str) -> int:
    candidate = str(raw or "INFO").strip().upper()
    return {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }.get(candidate, logging.INFO)


def configure_logging(settings: Settings = default_settings) -> logging.Logger:
    """Attach stderr (and optional file) handlers to the pairstore logger.

    Calling it again replaces the handlers installed by the previous call.
    """

    reset_logging()
    resolved_level = _normalize_level(settings.log_level)
    logger.setLevel(resolved_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        log_path = Path(settings.log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
            )
        except OSError as exc:
            logger.warning("log file unavailable path=%s error=%s", log_path, exc)

    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)
    return logger


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""

    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the pairstore namespace."""

    return logger.getChild(name)
