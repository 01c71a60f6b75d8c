"""
Infrastructure components for the Discord Playtime Bot.

This package contains infrastructure concerns:
- Logging configuration with per-environment levels
- Custom exception definitions
"""

from .logging import setup_logging, get_logger
from .logging_manager import LoggingManager, Environment, is_production, get_environment
from .exceptions import (
    PlaytimeBotError,
    ConfigurationError,
    StorageError,
    InvalidParametersError,
    SubscriptionNotFoundError,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LoggingManager",
    "Environment",
    "is_production",
    "get_environment",
    # Exceptions
    "PlaytimeBotError",
    "ConfigurationError",
    "StorageError",
    "InvalidParametersError",
    "SubscriptionNotFoundError",
]
