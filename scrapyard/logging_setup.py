"""Loguru sink setup for the CLI and embedding applications."""

import sys

from loguru import logger

from .settings import Settings


LOG_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {name}:{function} - {message}"


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with a stderr sink at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), format=LOG_FORMAT)
