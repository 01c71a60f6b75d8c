"""
Unit tests for the Discord gateway event handlers.
"""

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord import app_commands

from discord_playtime_bot.bots.handlers.event_handlers import MSG_UNEXPECTED_ERROR, EventHandlers
from discord_playtime_bot.infrastructure import StorageError
from tests.conftest import GUILD_ID


@pytest.fixture
def event_handlers(subscription_manager):
    bot = SimpleNamespace(bot=MagicMock())
    return EventHandlers(
        bot=bot,
        subscription_manager=subscription_manager,
        logger=logging.getLogger("test.event_handlers"),
    )


class TestOnReady:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_syncs_command_tree(self, event_handlers):
        event_handlers.bot.tree.sync = AsyncMock(return_value=[MagicMock()] * 9)

        await event_handlers.on_ready()

        event_handlers.bot.tree.sync.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sync_failure_is_logged(self, event_handlers):
        event_handlers.bot.tree.sync = AsyncMock(side_effect=discord.DiscordException("offline"))

        await event_handlers.on_ready()


class TestOnGuildJoin:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bootstraps_subscription(self, event_handlers, subscription_manager, mock_guild):
        await event_handlers.on_guild_join(mock_guild)

        subscription = await subscription_manager.get_subscription(GUILD_ID)
        assert subscription.duration_days == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_repeated_join_keeps_one_record(
        self, event_handlers, subscription_manager, mock_guild
    ):
        await event_handlers.on_guild_join(mock_guild)
        await subscription_manager.extend_subscription(GUILD_ID, 3)
        await event_handlers.on_guild_join(mock_guild)

        subscriptions = await subscription_manager.list_subscriptions()
        assert len(subscriptions) == 1
        assert subscriptions[0].duration_days == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_storage_failure_is_not_raised(
        self, event_handlers, subscription_manager, mock_guild
    ):
        subscription_manager.bootstrap_guild = AsyncMock(side_effect=StorageError("disk full"))

        await event_handlers.on_guild_join(mock_guild)

        subscription_manager.bootstrap_guild.assert_awaited_once_with(GUILD_ID)


class TestOnAppCommandError:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_replies_privately(self, event_handlers, mock_interaction):
        await event_handlers.on_app_command_error(
            mock_interaction, app_commands.AppCommandError("boom")
        )

        mock_interaction.response.send_message.assert_awaited_once_with(
            MSG_UNEXPECTED_ERROR, ephemeral=True
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_uses_followup_after_response(self, event_handlers, mock_interaction):
        mock_interaction.response.is_done.return_value = True

        await event_handlers.on_app_command_error(
            mock_interaction, app_commands.AppCommandError("boom")
        )

        mock_interaction.followup.send.assert_awaited_once_with(
            MSG_UNEXPECTED_ERROR, ephemeral=True
        )
        mock_interaction.response.send_message.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_send_failure_is_logged(self, event_handlers, mock_interaction):
        response = MagicMock(status=500, reason="Internal Server Error")
        mock_interaction.response.send_message.side_effect = discord.HTTPException(
            response, "unavailable"
        )

        await event_handlers.on_app_command_error(
            mock_interaction, app_commands.AppCommandError("boom")
        )
