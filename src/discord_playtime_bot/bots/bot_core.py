"""
Core bot management class for the Discord Playtime Bot.

This module wires the Discord client, the subscription manager, the access
gate and the command dispatcher together, and registers the slash commands
from the command catalog.
"""

import sys
from typing import Dict, Optional

import discord
from discord import app_commands
from discord.ext import commands

from discord_playtime_bot.bots.commands import CommandDispatcher, CommandRequest
from discord_playtime_bot.bots.handlers import EventHandlers
from discord_playtime_bot.config import SimpleConfig, SimpleConfigManager
from discord_playtime_bot.core import AccessGate, get_command
from discord_playtime_bot.core.types import (
    CMD_ADD_TIME,
    CMD_CHECK_SUBSCRIPTION,
    CMD_EXTEND_TIME,
    CMD_GRANT_ACCESS,
    CMD_LIST_TIMES,
    CMD_REMOVE_PLAY_TIME,
    CMD_RESET_ALL_PLAY_TIMES,
    CMD_RESET_PLAY_TIME,
    CMD_REVOKE_ACCESS,
)
from discord_playtime_bot.infrastructure import ConfigurationError, setup_logging
from discord_playtime_bot.subscription import SubscriptionManager


def _description(command_name: str) -> str:
    return get_command(command_name).description


def _option_descriptions(command_name: str) -> Dict[str, str]:
    """Slash parameter descriptions taken from the command catalog."""
    return {option.name: option.description for option in get_command(command_name).options}


class PlaytimeBot:
    """Main bot class that manages the Discord bot and all its components."""

    def __init__(
        self,
        config: Optional[SimpleConfig] = None,
        subscription_manager: Optional[SubscriptionManager] = None,
    ):
        """Initialize the bot with all necessary components."""
        self.logger = setup_logging(component_name="main_bot", log_file="logs/main_bot.log")

        if config is None:
            try:
                config = SimpleConfigManager().get_config()
            except ConfigurationError as e:
                self.logger.error(f"Failed to load configuration: {e}")
                sys.exit(1)
        self.config = config
        self.logger.setLevel(config.log_level)

        intents = discord.Intents.default()
        intents.guilds = True

        self.bot = commands.Bot(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.subscription_manager = subscription_manager or SubscriptionManager(
            db_path=config.db_path
        )
        self.access_gate = AccessGate(
            self.subscription_manager,
            owner_id=config.owner_id,
            owner_bypasses_expiry=config.owner_bypasses_expiry,
        )
        self.dispatcher = CommandDispatcher(
            subscription_manager=self.subscription_manager,
            access_gate=self.access_gate,
            config=config,
        )

        self._setup_event_handlers()
        self._register_commands()

    def _setup_event_handlers(self) -> None:
        """Setup event handlers for the bot."""
        self.event_handlers = EventHandlers(
            bot=self,
            subscription_manager=self.subscription_manager,
            logger=self.logger,
        )

        self.bot.event(self.event_handlers.on_ready)
        self.bot.event(self.event_handlers.on_guild_join)
        self.bot.tree.error(self.event_handlers.on_app_command_error)

    async def handle_interaction(
        self, interaction: discord.Interaction, command_name: str, **options
    ) -> None:
        """Dispatch a slash command and answer the interaction."""
        request = CommandRequest(
            command_name=command_name,
            guild_id=str(interaction.guild_id) if interaction.guild_id is not None else None,
            caller_id=str(interaction.user.id),
            options={name: value for name, value in options.items() if value is not None},
        )
        reply = await self.dispatcher.dispatch(request)
        await interaction.response.send_message(reply.text, ephemeral=reply.private)

    def _register_commands(self) -> None:
        """Register all slash commands on the command tree."""
        tree = self.bot.tree

        @tree.command(name=CMD_ADD_TIME, description=_description(CMD_ADD_TIME))
        @app_commands.describe(**_option_descriptions(CMD_ADD_TIME))
        async def addtime(interaction: discord.Interaction, steam_hex: str, play_time: int):
            await self.handle_interaction(
                interaction, CMD_ADD_TIME, steam_hex=steam_hex, play_time=play_time
            )

        @tree.command(name=CMD_LIST_TIMES, description=_description(CMD_LIST_TIMES))
        @app_commands.describe(**_option_descriptions(CMD_LIST_TIMES))
        async def listtimes(interaction: discord.Interaction, page: Optional[int] = None):
            await self.handle_interaction(interaction, CMD_LIST_TIMES, page=page)

        @tree.command(name=CMD_EXTEND_TIME, description=_description(CMD_EXTEND_TIME))
        @app_commands.describe(**_option_descriptions(CMD_EXTEND_TIME))
        async def extendtime(interaction: discord.Interaction, days: int):
            await self.handle_interaction(interaction, CMD_EXTEND_TIME, days=days)

        @tree.command(name=CMD_GRANT_ACCESS, description=_description(CMD_GRANT_ACCESS))
        @app_commands.describe(**_option_descriptions(CMD_GRANT_ACCESS))
        async def grantaccess(
            interaction: discord.Interaction, user: str, addtime: bool, removetime: bool
        ):
            await self.handle_interaction(
                interaction,
                CMD_GRANT_ACCESS,
                user=user,
                addtime=addtime,
                removetime=removetime,
            )

        @tree.command(name=CMD_REVOKE_ACCESS, description=_description(CMD_REVOKE_ACCESS))
        @app_commands.describe(**_option_descriptions(CMD_REVOKE_ACCESS))
        async def revokeaccess(interaction: discord.Interaction, user: str):
            await self.handle_interaction(interaction, CMD_REVOKE_ACCESS, user=user)

        @tree.command(
            name=CMD_CHECK_SUBSCRIPTION, description=_description(CMD_CHECK_SUBSCRIPTION)
        )
        async def checksubscription(interaction: discord.Interaction):
            await self.handle_interaction(interaction, CMD_CHECK_SUBSCRIPTION)

        @tree.command(name=CMD_RESET_PLAY_TIME, description=_description(CMD_RESET_PLAY_TIME))
        @app_commands.describe(**_option_descriptions(CMD_RESET_PLAY_TIME))
        async def resetplaytime(interaction: discord.Interaction, user: str):
            await self.handle_interaction(interaction, CMD_RESET_PLAY_TIME, user=user)

        @tree.command(
            name=CMD_RESET_ALL_PLAY_TIMES, description=_description(CMD_RESET_ALL_PLAY_TIMES)
        )
        async def resetallplaytimes(interaction: discord.Interaction):
            await self.handle_interaction(interaction, CMD_RESET_ALL_PLAY_TIMES)

        @tree.command(name=CMD_REMOVE_PLAY_TIME, description=_description(CMD_REMOVE_PLAY_TIME))
        @app_commands.describe(**_option_descriptions(CMD_REMOVE_PLAY_TIME))
        async def removeplaytime(interaction: discord.Interaction, steam_hex: str):
            await self.handle_interaction(interaction, CMD_REMOVE_PLAY_TIME, steam_hex=steam_hex)

    async def start(self) -> None:
        """Start the bot."""
        try:
            self.logger.info("Starting Playtime Bot...")
            await self.bot.start(self.config.discord_bot_token)
        except discord.DiscordException as e:
            self.logger.critical(f"Failed to start Playtime Bot: {e}")
            raise

    async def close(self) -> None:
        """Close the bot and clean up resources."""
        if self.bot:
            await self.bot.close()


async def main():
    """Main function to initialize and run the bot."""
    bot = PlaytimeBot()

    try:
        await bot.start()
    finally:
        await bot.close()
