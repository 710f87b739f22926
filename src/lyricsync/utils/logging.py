"""Logging configuration for Lyricsync.

Everything logs under the "lyricsync" namespace. The CLI configures it once
with setup_logging; library modules only call get_logger(__name__).
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT_LOGGER = "lyricsync"

# Noisy third-party loggers
_QUIET_LOGGERS = ("urllib3", "requests", "yt_dlp", "asyncio")

_SHORT_FORMAT = "%(levelname)s: %(message)s"
_VERBOSE_FORMAT = "%(asctime)s.%(msecs)03d %(name)s %(levelname)s: %(message)s"


def _formatter(verbose: bool) -> logging.Formatter:
    if verbose:
        return logging.Formatter(_VERBOSE_FORMAT, datefmt="%H:%M:%S")
    return logging.Formatter(_SHORT_FORMAT)


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the lyricsync logger."""
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = _formatter(verbose)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
