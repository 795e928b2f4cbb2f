"""
Helper utilities for the image proxy application.

This module contains logger setup and small parsing helpers shared by the
configuration, pipeline and cache modules.
"""
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name, level=logging.INFO):
    """
    Get a named logger with a console handler attached.

    The handler is only added once, so calling this repeatedly for the same
    name is safe.

    Args:
        name (str): Logger name
        level (int): Logging level for the logger and its handler

    Returns:
        logging.Logger: The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger


def env_flag(value, default=False):
    """
    Interpret an environment variable as a boolean.

    Args:
        value (str): Raw value, may be None
        default (bool): Result when value is unset

    Returns:
        bool: True for "true", "1" or "yes" (case-insensitive)
    """
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


def split_list(value):
    """
    Split a comma-separated environment value into a list of entries.

    Args:
        value (str): Raw value, may be None or empty

    Returns:
        list: Stripped, non-empty entries in their original order
    """
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]
