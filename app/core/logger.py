"""
app/core/logger.py

Centralised logging configuration.
Every module should obtain its logger via:

    from app.core.logger import get_logger
    logger = get_logger(__name__)

The level comes from ``settings.log_level`` (LOG_LEVEL), and DEBUG=true
overrides it.
"""

import logging
import sys

from app.core.config import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are only worth hearing from at WARNING and above.
# PIL logs every plugin it tries while identifying an image; multipart logs
# each form part it parses.
_QUIET_LOGGERS = ("PIL", "multipart", "uvicorn.access")


def resolve_level(log_level: str, debug: bool = False) -> int:
    """
    Map a level name such as "warning" to its logging constant.

    Unknown names fall back to INFO rather than failing startup.
    """
    if debug:
        return logging.DEBUG
    level = logging.getLevelName(log_level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _level() -> int:
    return resolve_level(settings.log_level, settings.debug)


def _configure_root_logger() -> None:
    """Attach the stdout handler to the root logger, once."""
    root = logging.getLogger()
    if root.handlers:
        # pytest and uvicorn --log-config install their own handlers.
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(_level())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
