"""Helper functions for the json2dcp command-line interface."""

import sys

from loguru import logger


def setup_logger(verbosity: int, level: str = "INFO") -> None:
    """Configure the loguru sink used by the CLI.

    Parameters
    ----------
    verbosity : int
        Number of ``-v`` flags. One selects DEBUG, two or more TRACE.
    level : str, optional
        Level used when no ``-v`` flag is given.
    """
    if verbosity >= 2:
        level = "TRACE"
    elif verbosity == 1:
        level = "DEBUG"

    log_format = "<level>{level:}</level> | <cyan>[{time:DD-MM-YYYY HH:mm:ss}]</cyan> | {message}"
    if level in ("DEBUG", "TRACE"):
        log_format = (
            "<level>{level:}</level> | <cyan>[{time:DD-MM-YYYY HH:mm:ss}]</cyan> | "
            "<green>[{name}:{function}:{line}]</green> - {message}"
        )

    logger.remove()
    logger.add(sys.stderr, format=log_format, level=level, colorize=True)
