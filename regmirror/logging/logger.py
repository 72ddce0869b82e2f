# regmirror/logging/logger.py
"""
Central logger factory.

All modules obtain loggers through get_logger() so that the package-level
handler is attached exactly once:

    from regmirror.logging.logger import get_logger
    from regmirror.logging.tags import MERGE

    logger = get_logger(__name__)
    logger.info(f"{MERGE} merged 3 components")
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "regmirror"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | int = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    """
    Attach a stream handler to the package root logger and set its level.

    Safe to call repeatedly; later calls only change the level.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
        root.propagate = True
        _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the regmirror hierarchy."""
    if not _configured:
        configure_logging()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
