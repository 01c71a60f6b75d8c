"""
Command dispatcher for the Discord Playtime Bot.

Routes a :class:`CommandRequest` through the access gate, validates its
options against the command catalog and hands it to the matching handler.
Catalog commands without a handler body answer with an explicit
"not available yet" reply.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from discord_playtime_bot.bots.commands.access_commands import AccessCommands
from discord_playtime_bot.bots.commands.base import (
    CommandReply,
    CommandRequest,
    invalid_parameters_reply,
)
from discord_playtime_bot.bots.commands.subscription_commands import SubscriptionCommands
from discord_playtime_bot.config.settings import SimpleConfig
from discord_playtime_bot.core.access_gate import AccessGate, Decision
from discord_playtime_bot.core.types import (
    CMD_CHECK_SUBSCRIPTION,
    CMD_EXTEND_TIME,
    CMD_GRANT_ACCESS,
    CMD_REVOKE_ACCESS,
    MSG_GUILD_ONLY,
    MSG_NOT_IMPLEMENTED,
    get_command,
)
from discord_playtime_bot.infrastructure import setup_logging
from discord_playtime_bot.subscription import SubscriptionManager

Route = Callable[[CommandRequest, Decision], Awaitable[CommandReply]]


class CommandDispatcher:
    """Runs the access gate and routes allowed commands to their handlers."""

    def __init__(
        self,
        subscription_manager: SubscriptionManager,
        access_gate: AccessGate,
        config: Optional[SimpleConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.subscription_manager = subscription_manager
        self.access_gate = access_gate
        self.config = config
        self.logger = logger or setup_logging("commands.dispatcher")

        self.access_commands = AccessCommands(
            subscription_manager=subscription_manager, logger=self.logger, config=config
        )
        self.subscription_commands = SubscriptionCommands(
            subscription_manager=subscription_manager, logger=self.logger, config=config
        )

        self._routes: Dict[str, Route] = {
            CMD_GRANT_ACCESS: lambda request, _: self.access_commands.grant_access_command(request),
            CMD_REVOKE_ACCESS: lambda request, _: self.access_commands.revoke_access_command(request),
            CMD_EXTEND_TIME: lambda request, _: self.subscription_commands.extend_time_command(request),
            CMD_CHECK_SUBSCRIPTION: lambda request, decision: (
                self.subscription_commands.check_subscription_command(request, decision.snapshot)
            ),
        }

    async def dispatch(
        self, request: CommandRequest, now: Optional[datetime] = None
    ) -> CommandReply:
        """
        Handle one command invocation.

        Args:
            request: The command invocation
            now: Evaluation instant, defaults to the current UTC time

        Returns:
            CommandReply: The reply to render for the caller
        """
        if request.guild_id is None:
            return CommandReply(MSG_GUILD_ONLY, private=True)

        decision = await self.access_gate.evaluate(
            request.guild_id, request.caller_id, request.command_name, now
        )
        if not decision:
            return CommandReply(decision.message, private=True)

        spec = get_command(request.command_name)
        problem = spec.validate_options(request.options)
        if problem is not None:
            self.logger.info(f"Invalid options for /{spec.name}: {problem}")
            return invalid_parameters_reply(spec.name)

        route = self._routes.get(spec.name)
        if not spec.implemented or route is None:
            self.logger.info(f"/{spec.name} invoked in guild {request.guild_id} but not implemented")
            return CommandReply(MSG_NOT_IMPLEMENTED, private=True)

        return await route(request, decision)
