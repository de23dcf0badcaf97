"""Logging setup for applications embedding the cache."""

import logging
import sys
from typing import Optional

from .settings import settings


def setup_logging(debug: Optional[bool] = None) -> None:
    """
    Configure root logging for the process.

    The library itself never installs handlers; call this from an
    application entry point if the cache's log output is wanted.

    Args:
        debug: Force DEBUG level (default from settings.DEBUG, otherwise
            settings.LOG_LEVEL)
    """
    if debug is None:
        debug = settings.DEBUG
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )
