"""
Logging Configuration

All package loggers hang below "hilfsmittel". Console output goes to
stderr so stdout stays free for result tables and JSON.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "hilfsmittel"
CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that flood DEBUG output with connection details
NOISY_LOGGERS = ("urllib3",)


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure the package logger.

    Args:
        verbose: DEBUG level, including urllib3 connection messages
        quiet: WARNING level (ignored when verbose is set)
        log_file: Optional path; records are appended there with timestamps
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Repeated calls replace handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
