"""
Discord event handlers for the Playtime Bot.
"""

from .event_handlers import EventHandlers

__all__ = ["EventHandlers"]
