"""
Discord bot implementation for the Playtime Bot.

This package contains:
- The bot core that registers slash commands
- Command handlers and the dispatcher
- Gateway event handlers
"""

from .bot_core import PlaytimeBot

__all__ = ["PlaytimeBot"]
