"""Console logging setup shared by the CLI script and the API."""

import logging
from typing import Optional


LOG_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Args:
        level: Log level name, case-insensitive (defaults to the configured LOG_LEVEL)

    Returns:
        The configured root logger

    Raises:
        ValueError: Unknown level name
    """
    if level is None:
        from sensorcal.config import get_config
        level = get_config().log_level
    level = str(level).upper()

    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
