# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup using Python's standard logging with Rich.

Library modules only call ``logging.getLogger(__name__)``. Applications that
want console output call ``setup_logging`` once.

Usage:
    from composite_builds._internal.logging import setup_logging

    setup_logging(level="verbose")
"""

import logging

from rich.logging import RichHandler

PACKAGE_LOGGER = "composite_builds"

# None means no console handler at all
LEVELS = {
    "quiet": None,
    "normal": logging.WARNING,
    "verbose": logging.INFO,
    "debug": logging.DEBUG,
}


def setup_logging(level: str = "normal") -> logging.Logger:
    """Configure the composite_builds logger with a Rich console handler.

    Maps 'quiet' | 'normal' | 'verbose' | 'debug'. Unknown levels fall back
    to 'normal'. Calling again replaces the handler installed earlier.
    """
    log_level = LEVELS.get(level.lower(), LEVELS["normal"])
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    if log_level is None:
        package_logger.setLevel(logging.CRITICAL + 1)
        return package_logger

    package_logger.setLevel(log_level)
    handler = RichHandler(
        rich_tracebacks=(log_level == logging.DEBUG),
        show_path=False,
        markup=False,
        show_time=False,
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    package_logger.addHandler(handler)
    return package_logger
