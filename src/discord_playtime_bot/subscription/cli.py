"""
CLI tool for managing Discord Playtime Bot subscriptions.

This module provides a command-line interface for the administrative
operations that are not exposed as slash commands: inspecting, bootstrapping,
extending and deleting guild subscriptions.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from .models import Subscription, utc_now
from .subscription_manager import SubscriptionManager
from discord_playtime_bot.infrastructure import PlaytimeBotError


def _print_subscription(subscription: Subscription) -> None:
    now = utc_now()
    status = "expired" if subscription.is_expired(now) else "active"
    print(f"Guild ID: {subscription.guild_id}")
    print(f"Started: {subscription.start_date.isoformat()}")
    print(f"Duration: {subscription.duration_days} days")
    print(f"Expires: {subscription.expiry.isoformat()} ({status})")
    print(f"Remaining: {subscription.remaining_days(now)} days")


async def list_subscriptions(manager: SubscriptionManager) -> None:
    """List all subscriptions."""
    subscriptions = await manager.list_subscriptions()
    if not subscriptions:
        print("No subscriptions found.")
        return

    print(f"Found {len(subscriptions)} subscription(s):")
    print("-" * 80)
    for subscription in subscriptions:
        _print_subscription(subscription)
        print("-" * 80)


async def get_subscription(manager: SubscriptionManager, guild_id: str) -> bool:
    """Show one guild's subscription."""
    subscription = await manager.get_subscription(guild_id)
    if subscription is None:
        print(f"No subscription found for guild {guild_id}")
        return False
    _print_subscription(subscription)
    return True


async def bootstrap_subscription(manager: SubscriptionManager, guild_id: str) -> bool:
    """Create a zero-day subscription if the guild has none."""
    if await manager.bootstrap_guild(guild_id):
        print(f"Created subscription for guild {guild_id}")
        return True
    print(f"Guild {guild_id} already has a subscription")
    return False


async def extend_subscription(manager: SubscriptionManager, guild_id: str, days: int) -> bool:
    """Add days to a guild's subscription."""
    subscription = await manager.extend_subscription(guild_id, days)
    print(
        f"Extended subscription for guild {guild_id} by {days} days "
        f"({subscription.remaining_days()} days remaining)"
    )
    return True


async def delete_subscription(manager: SubscriptionManager, guild_id: str) -> bool:
    """Delete a guild's subscription."""
    if await manager.delete_subscription(guild_id):
        print(f"Deleted subscription for guild {guild_id}")
        return True
    print(f"No subscription found for guild {guild_id}")
    return False


async def list_permissions(manager: SubscriptionManager, guild_id: str) -> None:
    """List the permission records of a guild."""
    permissions = await manager.list_permissions(guild_id)
    if not permissions:
        print(f"No permissions granted in guild {guild_id}")
        return

    for permission in permissions:
        print(
            f"User {permission.user_id}: add_time={permission.can_add_time} "
            f"remove_time={permission.can_remove_time}"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage Discord Playtime Bot subscriptions")
    parser.add_argument(
        "--db-path",
        default="data/playtime.db",
        help="Path to subscription database",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", help="List all subscriptions")

    get_parser = subparsers.add_parser("get", help="Show a guild's subscription")
    get_parser.add_argument("guild_id", help="Discord guild ID")

    bootstrap_parser = subparsers.add_parser(
        "bootstrap", help="Create a zero-day subscription for a guild"
    )
    bootstrap_parser.add_argument("guild_id", help="Discord guild ID")

    extend_parser = subparsers.add_parser("extend", help="Extend a guild's subscription")
    extend_parser.add_argument("guild_id", help="Discord guild ID")
    extend_parser.add_argument("days", type=int, help="Number of days to add")

    delete_parser = subparsers.add_parser("delete", help="Delete a guild's subscription")
    delete_parser.add_argument("guild_id", help="Discord guild ID")

    permissions_parser = subparsers.add_parser(
        "permissions", help="List permission records of a guild"
    )
    permissions_parser.add_argument("guild_id", help="Discord guild ID")

    return parser


async def run_cli(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    manager = SubscriptionManager(db_path=args.db_path)

    if args.command == "list":
        await list_subscriptions(manager)
        return 0
    if args.command == "permissions":
        await list_permissions(manager, args.guild_id)
        return 0
    if args.command == "get":
        ok = await get_subscription(manager, args.guild_id)
    elif args.command == "bootstrap":
        ok = await bootstrap_subscription(manager, args.guild_id)
    elif args.command == "extend":
        ok = await extend_subscription(manager, args.guild_id, args.days)
    else:
        ok = await delete_subscription(manager, args.guild_id)
    return 0 if ok else 1


def main():
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(run_cli()))
    except KeyboardInterrupt:
        print("\nOperation cancelled")
    except PlaytimeBotError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
