"""
Pytest configuration and shared fixtures for the Discord Playtime Bot test suite.

Storage fixtures use real SQLite files under ``tmp_path`` so the
uniqueness and atomic-update guarantees of the store are exercised.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_playtime_bot.bots.commands import CommandDispatcher, CommandRequest
from discord_playtime_bot.config.settings import SimpleConfig
from discord_playtime_bot.core.access_gate import AccessGate
from discord_playtime_bot.subscription.database import SubscriptionDatabase
from discord_playtime_bot.subscription.subscription_manager import SubscriptionManager

OWNER_ID = "100000000000000001"
MEMBER_ID = "200000000000000002"
GUILD_ID = "300000000000000003"
START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_config(tmp_path):
    """Create a configuration for testing."""
    return SimpleConfig(
        discord_bot_token="mock_bot_token",
        owner_id=OWNER_ID,
        db_path=str(tmp_path / "playtime.db"),
        log_level="DEBUG",
    )


@pytest.fixture
def database(mock_config):
    """A fresh SQLite database."""
    return SubscriptionDatabase(mock_config.db_path)


@pytest.fixture
def subscription_manager(database):
    return SubscriptionManager(database=database)


@pytest.fixture
def access_gate(subscription_manager):
    return AccessGate(subscription_manager, owner_id=OWNER_ID)


@pytest.fixture
def dispatcher(subscription_manager, access_gate, mock_config):
    return CommandDispatcher(
        subscription_manager=subscription_manager,
        access_gate=access_gate,
        config=mock_config,
    )


@pytest.fixture
def seed_subscription(database):
    """Create a subscription starting at START with the given duration."""

    def _seed(guild_id: str = GUILD_ID, days: int = 0, start: datetime = START):
        database.create_subscription_if_absent(guild_id, start)
        if days:
            database.add_subscription_days(guild_id, days)
        return database.get_subscription(guild_id)

    return _seed


@pytest.fixture
def make_request():
    """Build a CommandRequest with sensible defaults."""

    def _make(command_name: str, caller_id: str = OWNER_ID, guild_id=GUILD_ID, **options):
        return CommandRequest(
            command_name=command_name,
            guild_id=guild_id,
            caller_id=caller_id,
            options=options,
        )

    return _make


@pytest.fixture
def mock_guild():
    """Create a mock Discord guild for testing."""
    guild = MagicMock(spec=discord.Guild)
    guild.id = int(GUILD_ID)
    guild.name = "Test Guild"
    return guild


@pytest.fixture
def mock_interaction():
    """Create a mock slash command interaction for testing."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.guild_id = int(GUILD_ID)
    interaction.user = MagicMock(spec=discord.Member)
    interaction.user.id = int(OWNER_ID)
    interaction.command = None
    interaction.response = MagicMock()
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


def after(days: float = 0, **kwargs) -> datetime:
    """START shifted by a timedelta."""
    return START + timedelta(days=days, **kwargs)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
