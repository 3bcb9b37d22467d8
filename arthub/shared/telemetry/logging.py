"""Logging configuration for the application."""

import logging
import sys

from arthub.core.config import get_settings

# Chatty third-party loggers kept at WARNING unless debugging.
_NOISY_LOGGERS = ("web3", "urllib3", "asyncio", "aiohttp")


def setup_logging() -> None:
    """Configure application-wide logging to stdout.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
