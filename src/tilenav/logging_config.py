"""Logging setup for the ``tilenav`` command line front end."""

import logging
import sys
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(
    level: Union[int, str] = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route the ``tilenav`` logger to stderr and optionally a file.

    stdout is left alone because the front end prints tile addresses there.
    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: Logging level (e.g. logging.DEBUG, "INFO")
        log_file: Optional path of a log file, truncated on open

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger("tilenav")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)

    package_logger.debug("Logging to %s", log_file or "stderr")
    return package_logger
