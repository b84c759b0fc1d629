"""
MapQuest Geocoder — Logging Setup
==================================
All modules log through children of the ``mapquest_geocoder`` logger
(``logging.getLogger("mapquest_geocoder.<area>")``).  Nothing is printed
until :func:`configure_logging` attaches a console handler, which the CLI,
the batch tool, and the client's debug mode do for you.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "mapquest_geocoder"

logger = logging.getLogger(PACKAGE_LOGGER)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Set up console logging for the package.

    Attaches a :class:`logging.StreamHandler` (stderr) to the
    ``mapquest_geocoder`` logger if no handlers are already present.

    Args:
        verbose: Use DEBUG level when ``True``, otherwise INFO.

    Returns:
        The package logger.
    """
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="[%(asctime)s] %(levelname)-8s %(name)s — %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
