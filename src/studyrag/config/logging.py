"""Loguru sink configuration."""

import sys

from loguru import logger

_configured_level: str | None = None


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at ``level``.

    Calling this again with the same level is a no-op; a different level
    replaces the previous sink.
    """
    global _configured_level

    level = level.upper()
    if _configured_level == level:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )
    _configured_level = level
