"""
Logging setup for the taggg CLI and embedding applications.

The package disables its own loguru records on import, so embedding
applications see nothing unless they call setup_logging() or
``logger.enable("taggg")`` themselves.
"""

import sys

from loguru import logger


def setup_logging(level: str = "WARNING") -> None:
    """
    Replace loguru's default sink with a stderr sink at the given level
    and turn taggg's records back on.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.enable("taggg")
