"""
Subscription manager for the Discord Playtime Bot.

This module provides the async interface used by the access gate, the
command handlers, the CLI and the admin API. Blocking SQLite calls run in
worker threads so a slow store never stalls unrelated commands.
"""

import asyncio
from datetime import datetime
from typing import List, Optional

from .database import SubscriptionDatabase
from .models import MAX_DURATION_DAYS, Permission, Subscription
from discord_playtime_bot.infrastructure import (
    InvalidParametersError,
    SubscriptionNotFoundError,
    setup_logging,
)

logger = setup_logging("subscription.manager")


class SubscriptionManager:
    """Main subscription and permission manager."""

    def __init__(
        self,
        db_path: str = "data/playtime.db",
        database: Optional[SubscriptionDatabase] = None,
    ):
        """
        Initialize the subscription manager.

        Args:
            db_path: Path to the SQLite database file
            database: Pre-built database, mainly for tests
        """
        self.database = database or SubscriptionDatabase(db_path)

    async def get_subscription(self, guild_id: str) -> Optional[Subscription]:
        """Get a guild's subscription, or None if it was never bootstrapped."""
        return await asyncio.to_thread(self.database.get_subscription, guild_id)

    async def get_permission(self, guild_id: str, user_id: str) -> Optional[Permission]:
        """Get the permission record for a (guild, user) pair."""
        return await asyncio.to_thread(self.database.get_permission, guild_id, user_id)

    async def bootstrap_guild(self, guild_id: str, now: Optional[datetime] = None) -> bool:
        """
        Create a zero-day subscription for a newly joined guild.

        Idempotent: a repeated join notification leaves the existing record
        untouched.

        Returns:
            True if a subscription was created
        """
        return await asyncio.to_thread(
            self.database.create_subscription_if_absent, guild_id, now
        )

    async def extend_subscription(self, guild_id: str, additional_days: int) -> Subscription:
        """
        Add days to a guild's subscription.

        Args:
            guild_id: Discord guild ID
            additional_days: Positive number of days to add

        Returns:
            The updated subscription

        Raises:
            InvalidParametersError: If additional_days is not a positive integer
                or would push the total past MAX_DURATION_DAYS
            SubscriptionNotFoundError: If the guild has no subscription
            StorageError: If the store cannot be updated
        """
        if (
            isinstance(additional_days, bool)
            or not isinstance(additional_days, int)
            or additional_days <= 0
        ):
            raise InvalidParametersError(
                f"Extension days must be a positive integer, got {additional_days!r}"
            )
        if additional_days > MAX_DURATION_DAYS:
            raise InvalidParametersError(
                f"Extension days cannot exceed {MAX_DURATION_DAYS}, got {additional_days}"
            )

        subscription = await asyncio.to_thread(
            self.database.add_subscription_days, guild_id, additional_days
        )
        if subscription is None:
            raise SubscriptionNotFoundError(guild_id)
        return subscription

    async def grant_access(
        self,
        guild_id: str,
        user_id: str,
        can_add_time: bool,
        can_remove_time: bool,
    ) -> Permission:
        """Create or overwrite the permission record for a (guild, user) pair."""
        permission = Permission(
            guild_id=guild_id,
            user_id=user_id,
            can_add_time=bool(can_add_time),
            can_remove_time=bool(can_remove_time),
        )
        return await asyncio.to_thread(self.database.upsert_permission, permission)

    async def revoke_access(self, guild_id: str, user_id: str) -> bool:
        """
        Delete the permission record for a (guild, user) pair.

        Revoking a pair without a record is a successful no-op.

        Returns:
            True if a record was removed
        """
        return await asyncio.to_thread(self.database.delete_permission, guild_id, user_id)

    # Administrative operations (CLI / admin API)

    async def list_subscriptions(self) -> List[Subscription]:
        return await asyncio.to_thread(self.database.list_subscriptions)

    async def delete_subscription(self, guild_id: str) -> bool:
        return await asyncio.to_thread(self.database.delete_subscription, guild_id)

    async def list_permissions(self, guild_id: str) -> List[Permission]:
        return await asyncio.to_thread(self.database.list_permissions, guild_id)
