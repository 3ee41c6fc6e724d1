import logging
import sys
from typing import Optional

from .config import config

PACKAGE_LOGGER = "sitescrape_core"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: Optional[bool] = None) -> logging.Logger:
    """Attach one stderr handler to the package logger.

    Modules log through logging.getLogger(__name__) and propagate here, so
    stdout stays free for JSON output. Calling again only updates the level.
    """
    if debug is None:
        debug = config.debug
    level = logging.DEBUG if debug else logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handler = next((h for h in package_logger.handlers if getattr(h, "_sitescrape", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._sitescrape = True
        package_logger.addHandler(handler)
        package_logger.propagate = False
    package_logger.setLevel(level)
    handler.setLevel(level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package logger, configuring it on first use"""
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name)
