"""
CodeMentor - Logging
Single entry point that attaches a console handler to the package logger.
"""

import logging
from typing import Union

LOGGER_NAME = "codementor"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Configure the ``codementor`` logger. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid stacking handlers when the app reloads
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
