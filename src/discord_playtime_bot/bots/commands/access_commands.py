"""
Permission management command handlers.

``/grantaccess`` and ``/revokeaccess`` are owner-only; the access gate has
already checked the caller by the time these handlers run.
"""

import re

from discord_playtime_bot.bots.commands.base import (
    BaseCommandHandler,
    CommandReply,
    CommandRequest,
)
from discord_playtime_bot.infrastructure import InvalidParametersError, StorageError

USER_MENTION = re.compile(r"^<@!?(\d+)>$")


def parse_user_id(raw: str) -> str:
    """
    Accept a raw Discord user ID or a user mention.

    Raises:
        InvalidParametersError: If the value is neither
    """
    value = raw.strip()
    match = USER_MENTION.match(value)
    if match:
        return match.group(1)
    if value.isdigit():
        return value
    raise InvalidParametersError(f"Not a Discord user ID: {raw!r}")


class AccessCommands(BaseCommandHandler):
    """Handles permission grant and revoke commands."""

    async def grant_access_command(self, request: CommandRequest) -> CommandReply:
        """Create or overwrite a user's add/remove time permission."""
        try:
            user_id = parse_user_id(request.options["user"])
            permission = await self.subscription_manager.grant_access(
                request.guild_id,
                user_id,
                can_add_time=request.options["addtime"],
                can_remove_time=request.options["removetime"],
            )
        except (InvalidParametersError, StorageError) as e:
            return self._handle_command_error(request, e)

        self.logger.info(
            f"User {request.caller_id} granted access to {permission.user_id} "
            f"in guild {request.guild_id}"
        )
        return CommandReply("Access granted successfully.")

    async def revoke_access_command(self, request: CommandRequest) -> CommandReply:
        """Remove a user's permission record; revoking nothing still succeeds."""
        try:
            user_id = parse_user_id(request.options["user"])
            await self.subscription_manager.revoke_access(request.guild_id, user_id)
        except (InvalidParametersError, StorageError) as e:
            return self._handle_command_error(request, e)

        self.logger.info(
            f"User {request.caller_id} revoked access of {user_id} in guild {request.guild_id}"
        )
        return CommandReply("Access revoked successfully.")
