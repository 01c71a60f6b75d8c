"""
Subscription command handlers.
"""

from discord_playtime_bot.bots.commands.base import (
    BaseCommandHandler,
    CommandReply,
    CommandRequest,
)
from discord_playtime_bot.core.access_gate import SubscriptionSnapshot
from discord_playtime_bot.infrastructure import (
    InvalidParametersError,
    StorageError,
    SubscriptionNotFoundError,
)


class SubscriptionCommands(BaseCommandHandler):
    """Handles subscription extension and status commands."""

    async def extend_time_command(self, request: CommandRequest) -> CommandReply:
        """Add days to this guild's subscription (owner only)."""
        days = request.options["days"]
        try:
            subscription = await self.subscription_manager.extend_subscription(
                request.guild_id, days
            )
        except (InvalidParametersError, SubscriptionNotFoundError, StorageError) as e:
            return self._handle_command_error(request, e)

        self.logger.info(
            f"Guild {request.guild_id} extended by {days} days, "
            f"now {subscription.duration_days} days in total"
        )
        return CommandReply(f"Subscription extended by {days} days.")

    async def check_subscription_command(
        self, request: CommandRequest, snapshot: SubscriptionSnapshot
    ) -> CommandReply:
        """Report the remaining days computed by the access gate."""
        return CommandReply(f"Subscription has {snapshot.remaining_days} days remaining.")
