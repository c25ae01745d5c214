"""Logging setup for the pocket_calc CLI and web server."""

import logging
import sys
from typing import List, Optional

LOGGER_NAME = "pocket_calc"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route the package's log records to stdout, and to log_file when given.

    Calling it again swaps out the handlers it installed last time.

    Args:
        level: Threshold for the 'pocket_calc' logger
        log_file: Optional file that also receives the records (appended)
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(level)
    package_logger.debug("Logging at %s", logging.getLevelName(level))
