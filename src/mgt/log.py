"""Logging setup for the mgt application."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the root handler and return the ``mgt`` logger.

    ``verbose`` enables the debug trace of settings construction,
    commits and teardown.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=_FORMAT)

    logger = logging.getLogger("mgt")
    logger.setLevel(level)
    return logger
