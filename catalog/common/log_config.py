"""
Logging Configuration

Configures logging for the catalog package and the CLI scripts.
Output goes to stderr so stdout stays free for import summaries and price
tables.
"""

import logging
import sys
from typing import Iterable

# Package loggers plus the running script (scripts log under __main__)
DEFAULT_LOGGERS = ("catalog", "__main__")

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    logger_names: Iterable[str] = DEFAULT_LOGGERS,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set level to DEBUG (per-variant upsert traces)
        quiet: If True, set level to WARNING (errors and grouping conflicts only)
        logger_names: Loggers to attach the stderr handler to
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for name in logger_names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Calling twice must not duplicate output
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
