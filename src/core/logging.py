"""Logging configuration for the API process."""

import logging

from src.core.config import settings


def configure_logging(level: str = None) -> logging.Logger:
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("src")
