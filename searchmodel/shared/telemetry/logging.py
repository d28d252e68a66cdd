"""Logging configuration for searchmodel."""

import logging
import sys

from searchmodel.core.config import get_settings

PACKAGE_LOGGER = "searchmodel"


def setup_logging() -> None:
    """Configure logging for applications embedding searchmodel.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Libraries only log; call this from the
    application entry point, not at import time. The package logger gets
    the level too, so reassembly debug lines show up even when the host
    application configured the root logger first.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
