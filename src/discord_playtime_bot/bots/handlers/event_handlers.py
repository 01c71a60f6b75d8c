"""
Event handlers for the Discord Playtime Bot.

This module contains the Discord gateway event handlers, separated from the
bot core for better organization.
"""

import logging
from typing import Any

import discord
from discord import app_commands

from discord_playtime_bot.infrastructure import StorageError
from discord_playtime_bot.subscription import SubscriptionManager

MSG_UNEXPECTED_ERROR = "An unexpected error occurred. Please try again later."


class EventHandlers:
    """Handles all Discord bot events."""

    def __init__(
        self,
        bot: Any,
        subscription_manager: SubscriptionManager,
        logger: logging.Logger,
    ):
        """Initialize event handlers."""
        self.bot_instance = bot  # This is the PlaytimeBot instance
        self.bot = bot.bot  # This is the actual Discord bot
        self.subscription_manager = subscription_manager
        self.logger = logger

    async def on_ready(self) -> None:
        """Bot ready event: sync the slash command tree."""
        self.logger.info(f"Playtime Bot online: {self.bot.user}")

        try:
            synced = await self.bot.tree.sync()
            self.logger.info(f"Slash commands registered: {len(synced)}")
        except discord.DiscordException as e:
            self.logger.error(f"Failed to register slash commands: {e}", exc_info=True)

    async def on_guild_join(self, guild: discord.Guild) -> None:
        """Bootstrap a zero-day subscription when the bot joins a guild."""
        try:
            created = await self.subscription_manager.bootstrap_guild(str(guild.id))
        except StorageError as e:
            self.logger.error(f"Error initializing subscription for guild {guild.id}: {e}")
            return

        if created:
            self.logger.info(f"Initialized subscription for guild {guild.id}")
        else:
            self.logger.info(f"Guild {guild.id} already had a subscription")

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Slash command error handler."""
        command = interaction.command.name if interaction.command else None
        self.logger.error(f"Command error in /{command}: {error}", exc_info=error)

        try:
            if interaction.response.is_done():
                await interaction.followup.send(MSG_UNEXPECTED_ERROR, ephemeral=True)
            else:
                await interaction.response.send_message(MSG_UNEXPECTED_ERROR, ephemeral=True)
        except discord.HTTPException as send_error:
            self.logger.error(f"Failed to send error message for /{command}: {send_error}")
