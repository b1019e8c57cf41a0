"""Logging setup shared by the API process and maintenance scripts."""

from __future__ import annotations

import logging

from blogshive.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the ``blogshive`` logger.

    Calling this more than once only adjusts the level.
    """
    logger = logging.getLogger("blogshive")
    logger.setLevel((level or settings.log_level).upper())
    if not any(getattr(handler, "_blogshive", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._blogshive = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
