"""Opt-in log output for the shapefn package logger."""

from __future__ import annotations

import logging
import sys

from shapefn.config import Settings, get_settings

__all__ = ["setup_logger"]

PACKAGE_LOGGER = "shapefn"


def setup_logger(settings: Settings | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        settings: Level and format to use. Defaults to get_settings(), which
            reads SHAPEFN_LOG_LEVEL and SHAPEFN_LOG_FORMAT.

    Returns:
        The "shapefn" logger. Calling this again only updates the level.
    """
    settings = settings or get_settings()
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Only configure if not already configured
    if not any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=settings.log_format, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(getattr(logging, settings.log_level))
    return logger
