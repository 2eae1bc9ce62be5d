"""Logging setup for the gitgen CLI."""

from __future__ import annotations

import logging

_LOGGER_NAME = "gitgen"


def configure_logging(*, verbose: bool = False, level: str = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the ``gitgen`` logger.

    ``verbose`` forces DEBUG; otherwise *level* is used.
    """
    resolved = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("[gitgen] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
