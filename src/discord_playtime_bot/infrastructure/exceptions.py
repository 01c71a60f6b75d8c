"""
Custom exceptions for the Discord Playtime Bot.

This module defines the exceptions raised by the storage, subscription and
configuration layers. The access gate and the command dispatcher translate
them into user-visible denials.
"""


class PlaytimeBotError(Exception):
    """Base exception for all Playtime Bot related errors."""

    pass


class ConfigurationError(PlaytimeBotError):
    """Raised when there are configuration-related errors."""

    pass


class StorageError(PlaytimeBotError):
    """Raised when a read or write against the record store fails."""

    pass


class InvalidParametersError(PlaytimeBotError):
    """Raised when command input is rejected before any mutation."""

    pass


class SubscriptionNotFoundError(PlaytimeBotError):
    """Raised when a guild has no subscription record."""

    def __init__(self, guild_id: str):
        super().__init__(f"No subscription found for guild {guild_id}")
        self.guild_id = guild_id
