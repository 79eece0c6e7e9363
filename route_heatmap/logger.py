"""Centralized logging configuration for route-heatmap."""

import logging
import sys

__all__ = [
    'setup_logger',
    'logger',
    'set_debug_mode',
]


def setup_logger(name: str = 'route_heatmap', level: int = logging.INFO, debug: bool = False) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Base logging level
        debug: If True, set level to DEBUG

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if debug:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG if debug else logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logger()


def set_debug_mode(enabled: bool) -> None:
    """Enable or disable debug logging globally.

    Args:
        enabled: True to enable debug mode
    """
    level = logging.DEBUG if enabled else logging.INFO
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
