"""
Base command handler class and the dispatch boundary types.

Handlers never talk to Discord directly: they take a :class:`CommandRequest`
and return a :class:`CommandReply`, which the client layer renders as an
interaction response.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from discord_playtime_bot.config.settings import SimpleConfig
from discord_playtime_bot.core.types import (
    MSG_STORAGE_ERROR,
    MSG_SUBSCRIPTION_NOT_FOUND,
    get_command,
)
from discord_playtime_bot.infrastructure import (
    InvalidParametersError,
    StorageError,
    SubscriptionNotFoundError,
)
from discord_playtime_bot.subscription import SubscriptionManager


@dataclass(frozen=True)
class CommandRequest:
    """A single slash command invocation."""

    command_name: str
    guild_id: Optional[str]
    caller_id: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CommandReply:
    """Reply payload; ``private`` replies are visible only to the caller."""

    text: str
    private: bool = False


def invalid_parameters_reply(command_name: str) -> CommandReply:
    """Invalid-input reply carrying the command's usage line."""
    spec = get_command(command_name)
    usage = spec.usage if spec else f"/{command_name}"
    return CommandReply(f"Invalid parameters. Usage: {usage}", private=True)


class BaseCommandHandler:
    """Base class for command handlers with common functionality."""

    def __init__(
        self,
        subscription_manager: SubscriptionManager,
        logger: Optional[logging.Logger] = None,
        config: Optional[SimpleConfig] = None,
    ):
        """Initialize the base command handler."""
        self.subscription_manager = subscription_manager
        self.logger = logger or logging.getLogger("commands")
        self.config = config

    def _handle_command_error(self, request: CommandRequest, error: Exception) -> CommandReply:
        """Turn a handler failure into a specific private reply."""
        if isinstance(error, InvalidParametersError):
            self.logger.info(f"Rejected /{request.command_name} input: {error}")
            return invalid_parameters_reply(request.command_name)

        if isinstance(error, SubscriptionNotFoundError):
            self.logger.warning(f"/{request.command_name} found no subscription: {error}")
            return CommandReply(MSG_SUBSCRIPTION_NOT_FOUND, private=True)

        if isinstance(error, StorageError):
            self.logger.error(f"Storage failure in /{request.command_name}: {error}")
            return CommandReply(MSG_STORAGE_ERROR, private=True)

        raise error
