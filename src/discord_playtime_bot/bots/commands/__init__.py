"""
Command handlers for the Discord Playtime Bot.

This package contains the dispatch boundary types, the handlers for the
implemented commands and the dispatcher that ties them to the access gate.
"""

from .base import BaseCommandHandler, CommandReply, CommandRequest
from .access_commands import AccessCommands
from .subscription_commands import SubscriptionCommands
from .dispatcher import CommandDispatcher

__all__ = [
    "BaseCommandHandler",
    "CommandReply",
    "CommandRequest",
    "AccessCommands",
    "SubscriptionCommands",
    "CommandDispatcher",
]
