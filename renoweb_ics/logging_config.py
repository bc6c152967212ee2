"""
This module sets up logging for the application.
"""
import logging
from typing import Optional

from affaldsplan.config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = LOG_LEVEL, log_file: Optional[str] = LOG_FILE) -> None:
    """
    Configures the root logger with a console handler and, when ``log_file``
    is set, a file handler.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # urllib3 logs every connection at DEBUG/INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.info(f"Logging configured at level {logging.getLevelName(level)}.")
