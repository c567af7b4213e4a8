"""
Centralized logging configuration for the raffle
Console logging with an environment-controlled level
"""

import logging
import os
import sys


def setup_logging(app_name='vrf_raffle', log_level=None):
    """
    Setup console logging for the raffle package

    Args:
        app_name: Logger name to configure (the package logger by default)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            falls back to LOG_LEVEL, then INFO

    Returns:
        logging.Logger: Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(app_name)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(
        fmt='[%(asctime)s] %(levelname)-8s %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger


def log_error(logger, error, context=None):
    """Log error with optional context"""
    if context:
        logger.error(f"{context}: {error}", exc_info=True)
    else:
        logger.error(str(error), exc_info=True)
