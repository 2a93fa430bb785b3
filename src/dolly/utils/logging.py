"""Logging configuration for Dolly."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SHORT_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Set up console logging at `level`.

    A log file, when given, always records DEBUG detail (request bodies,
    the ffmpeg command line) with timestamps, whatever the console shows.
    """
    # HTTP and media libraries are chatty at DEBUG
    for noisy in ("urllib3", "pydub"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    console_level = getattr(logging, level.upper())
    logger = logging.getLogger("dolly")
    logger.setLevel(logging.DEBUG if log_file else console_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(VERBOSE_FORMAT if verbose else SHORT_FORMAT)
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(VERBOSE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
