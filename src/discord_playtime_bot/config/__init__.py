"""
Configuration management for the Discord Playtime Bot.

This package provides:
- The configuration dataclass shared by the bot, CLI and admin API
- Environment variable loading (including ``.env`` files)
"""

from .settings import SimpleConfig, SimpleConfigManager

__all__ = [
    "SimpleConfig",
    "SimpleConfigManager",
]
