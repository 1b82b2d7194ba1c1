"""
Logging configuration for StyleLens.
"""

import logging
import sys
from typing import Optional


def setup_logger(
    name: str = "stylelens",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured: only adjust the level so the CLI's --verbose
    # still takes effect after the import-time setup below.
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Default logger instance — created once at import time
logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "stylelens.session") propagate to the package logger,
    so every record shows which component produced it.

    Args:
        module_name: Name of the module (e.g., 'document', 'session')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"stylelens.{module_name}")
