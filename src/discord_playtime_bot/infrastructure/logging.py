"""
Centralized logging entry points for the Discord Playtime Bot.

Components call :func:`setup_logging` once at import time and keep the
returned logger as a module-level ``logger``.
"""

import logging
from typing import Optional

from .logging_manager import setup_logging as _setup_logging


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for a bot component using the YAML configuration.

    Args:
        component_name: Name of the component (e.g. 'main_bot', 'subscription.database')
        log_level: Logging level override. If None, the environment decides:
                  Development=DEBUG, Staging=INFO, Production=WARNING
        log_file: Log file path used when no YAML configuration is available

    Returns:
        logging.Logger: Configured logger instance
    """
    return _setup_logging(component_name, log_level, log_file)


def get_logger(component_name: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return logging.getLogger(component_name)
