"""
Configuration management for the Discord Playtime Bot.

Settings are read from the process environment after loading an optional
``.env`` file. The owner identity is read once here and handed to the
access gate as an immutable value.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from discord_playtime_bot.infrastructure.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SimpleConfig:
    """Configuration values for the bot, the CLI and the admin API."""

    # Required configuration
    discord_bot_token: str
    owner_id: str

    # Optional configuration with defaults
    db_path: str = "data/playtime.db"
    log_level: str = "INFO"
    owner_bypasses_expiry: bool = False

    # Admin API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    admin_api_key: Optional[str] = None


class SimpleConfigManager:
    """Builds a :class:`SimpleConfig` from environment variables."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to environment file
        """
        self.env_file_path = env_file_path
        self._load_environment()

    def _load_environment(self):
        """Load environment variables from file."""
        if os.path.exists(self.env_file_path):
            load_dotenv(dotenv_path=self.env_file_path)
            logger.info(f"Loaded environment from {self.env_file_path}")
        else:
            logger.debug(f"Environment file {self.env_file_path} not found")

    def _get_required_env(self, key: str) -> str:
        """
        Get required environment variable.

        Raises:
            ConfigurationError: If environment variable is not set
        """
        value = os.getenv(key)
        if not value or not value.strip():
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value.strip()

    def _get_optional_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get optional environment variable."""
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _get_bool_env(self, key: str, default: bool = False) -> bool:
        """Get a boolean flag from environment variables."""
        value = self._get_optional_env(key)
        if value is None:
            return default
        return value.lower() in TRUE_VALUES

    def _get_int_env(self, key: str, default: int) -> int:
        """Get an integer from environment variables."""
        value = self._get_optional_env(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"Environment variable {key} must be an integer, got {value!r}")

    def get_config(self) -> SimpleConfig:
        """
        Get the bot configuration.

        Returns:
            SimpleConfig: Bot configuration

        Raises:
            ConfigurationError: If required configuration is missing or malformed
        """
        config = SimpleConfig(
            discord_bot_token=self._get_required_env("DISCORD_BOT_TOKEN"),
            owner_id=self._get_required_env("BOT_CREATOR_ID"),
            db_path=self._get_optional_env("SUBSCRIPTION_DB_PATH", "data/playtime.db"),
            log_level=self._get_optional_env("LOG_LEVEL", "INFO").upper(),
            owner_bypasses_expiry=self._get_bool_env("OWNER_BYPASSES_EXPIRY"),
            api_host=self._get_optional_env("API_HOST", "0.0.0.0"),
            api_port=self._get_int_env("API_PORT", 8000),
            admin_api_key=self._get_optional_env("ADMIN_API_KEY"),
        )
        logger.info("Configuration loaded successfully")
        return config
