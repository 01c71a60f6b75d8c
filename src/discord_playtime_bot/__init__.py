"""
Discord Playtime Bot - time-limited, per-guild access to administrative slash commands.

Every slash command passes through an access gate that checks the guild's
subscription window and the caller's authorization before the command runs.

Architecture:
- Core: Command catalog and the access gate
- Subscription: Subscription and permission records, storage, operator CLI
- Bots: Discord client, command handlers and event handlers
- API: REST administration of subscriptions
- Config: Configuration management
- Infrastructure: Logging and exceptions
"""

__version__ = "1.0.0"
__author__ = "Discord Playtime Bot Team"

# Core components
from .core.access_gate import AccessGate, Decision, SubscriptionSnapshot
from .core.types import COMMAND_CATALOG, AuthClass, Capability, DenialReason

# Subscription components
from .subscription import Permission, Subscription, SubscriptionManager

# Configuration
from .config.settings import SimpleConfig, SimpleConfigManager

# Infrastructure
from .infrastructure.logging import setup_logging, get_logger
from .infrastructure.exceptions import (
    PlaytimeBotError,
    ConfigurationError,
    StorageError,
    InvalidParametersError,
    SubscriptionNotFoundError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core components
    "AccessGate",
    "Decision",
    "SubscriptionSnapshot",
    "COMMAND_CATALOG",
    "AuthClass",
    "Capability",
    "DenialReason",
    # Subscription components
    "Permission",
    "Subscription",
    "SubscriptionManager",
    # Configuration
    "SimpleConfig",
    "SimpleConfigManager",
    # Infrastructure
    "setup_logging",
    "get_logger",
    "PlaytimeBotError",
    "ConfigurationError",
    "StorageError",
    "InvalidParametersError",
    "SubscriptionNotFoundError",
]
