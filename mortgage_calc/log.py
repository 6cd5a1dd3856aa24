"""Logging configuration for the mortgage calculator."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Send package log records to stderr at ``level``.

    Standard output is reserved for schedules and summaries.
    """
    logger = logging.getLogger("mortgage_calc")
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
