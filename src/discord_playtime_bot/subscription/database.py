"""
Database operations for subscription and permission records.

One subscription per guild and one permission record per (guild, user) are
enforced by primary keys, so duplicate bootstrap notifications and repeated
grants can never create a second record. Every storage failure, including
unreadable rows, is raised as :class:`StorageError`.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .models import MAX_DURATION_DAYS, Permission, Subscription, ensure_utc, utc_now
from discord_playtime_bot.infrastructure import (
    InvalidParametersError,
    StorageError,
    setup_logging,
)

logger = setup_logging("subscription.database")

SCHEMA = f"""
    CREATE TABLE IF NOT EXISTS subscriptions (
        guild_id TEXT PRIMARY KEY,
        start_date TEXT NOT NULL,
        duration_days INTEGER NOT NULL DEFAULT 0
            CHECK (duration_days BETWEEN 0 AND {MAX_DURATION_DAYS})
    );

    CREATE TABLE IF NOT EXISTS permissions (
        guild_id TEXT NOT NULL,
        user_id TEXT NOT NULL,
        can_add_time INTEGER NOT NULL DEFAULT 0,
        can_remove_time INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (guild_id, user_id)
    );
"""


class SubscriptionDatabase:
    """SQLite store for subscriptions and permissions."""

    def __init__(self, db_path: str = "data/playtime.db", timeout: float = 5.0):
        """
        Initialize the database.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds to wait on a locked database before failing
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def _connect(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and translate failures."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.db_path}: {e}")
            raise StorageError(f"{operation} failed: {e}") from e

        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            logger.error(f"{operation} failed: {e}")
            raise StorageError(f"{operation} failed: {e}") from e
        finally:
            conn.close()

    def _init_database(self):
        """Initialize the database schema."""
        with self._connect("Schema initialization") as conn:
            conn.executescript(SCHEMA)
        logger.info(f"Database initialized at {self.db_path}")

    @staticmethod
    def _row_to_subscription(row) -> Subscription:
        """Build a Subscription, reporting unreadable rows as StorageError."""
        try:
            subscription = Subscription(
                guild_id=row[0],
                start_date=ensure_utc(datetime.fromisoformat(row[1])),
                duration_days=int(row[2]),
            )
            subscription.expiry  # raises OverflowError past datetime.max
        except (TypeError, ValueError, OverflowError) as e:
            logger.error(f"Malformed subscription row for guild {row[0]}: {e}")
            raise StorageError(f"Malformed subscription record for guild {row[0]}: {e}") from e
        return subscription

    @staticmethod
    def _row_to_permission(row) -> Permission:
        return Permission(
            guild_id=row[0],
            user_id=row[1],
            can_add_time=bool(row[2]),
            can_remove_time=bool(row[3]),
        )

    # Subscriptions

    def get_subscription(self, guild_id: str) -> Optional[Subscription]:
        """
        Get the subscription for a guild.

        Returns:
            Subscription or None if the guild was never bootstrapped
        """
        with self._connect(f"Subscription lookup for guild {guild_id}") as conn:
            row = conn.execute(
                "SELECT guild_id, start_date, duration_days FROM subscriptions WHERE guild_id = ?",
                (guild_id,),
            ).fetchone()
        return self._row_to_subscription(row) if row else None

    def create_subscription_if_absent(
        self, guild_id: str, start_date: Optional[datetime] = None
    ) -> bool:
        """
        Insert a zero-day subscription unless one already exists.

        Returns:
            True if a record was created, False if the guild already had one
        """
        start = ensure_utc(start_date) if start_date is not None else utc_now()
        with self._connect(f"Subscription bootstrap for guild {guild_id}") as conn:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO subscriptions (guild_id, start_date, duration_days) "
                "VALUES (?, ?, 0)",
                (guild_id, start.isoformat()),
            )
            created = cursor.rowcount > 0

        if created:
            logger.info(f"Created subscription for guild {guild_id}")
        else:
            logger.debug(f"Subscription already exists for guild {guild_id}")
        return created

    def add_subscription_days(self, guild_id: str, days: int) -> Optional[Subscription]:
        """
        Atomically add days to a guild's subscription.

        The increment happens inside a single UPDATE so concurrent extensions
        are serialized by SQLite rather than overwriting each other. The same
        statement refuses to grow the total past ``MAX_DURATION_DAYS``.

        Returns:
            The updated Subscription, or None if the guild has no record

        Raises:
            InvalidParametersError: If the new total would exceed the limit
        """
        with self._connect(f"Subscription extension for guild {guild_id}") as conn:
            cursor = conn.execute(
                "UPDATE subscriptions SET duration_days = duration_days + ? "
                "WHERE guild_id = ? AND duration_days + ? <= ?",
                (days, guild_id, days, MAX_DURATION_DAYS),
            )
            updated = cursor.rowcount > 0
            row = conn.execute(
                "SELECT guild_id, start_date, duration_days FROM subscriptions WHERE guild_id = ?",
                (guild_id,),
            ).fetchone()

        if row is None:
            return None
        if not updated:
            logger.warning(
                f"Refused to extend guild {guild_id} by {days} days: "
                f"total would exceed {MAX_DURATION_DAYS} days"
            )
            raise InvalidParametersError(
                f"Subscription length cannot exceed {MAX_DURATION_DAYS} days"
            )

        logger.info(f"Extended subscription for guild {guild_id} by {days} days")
        return self._row_to_subscription(row)

    def delete_subscription(self, guild_id: str) -> bool:
        """Delete a guild's subscription. Returns whether a record existed."""
        with self._connect(f"Subscription deletion for guild {guild_id}") as conn:
            cursor = conn.execute("DELETE FROM subscriptions WHERE guild_id = ?", (guild_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted subscription for guild {guild_id}")
        else:
            logger.warning(f"No subscription found for guild {guild_id}")
        return deleted

    def list_subscriptions(self) -> List[Subscription]:
        """List all subscriptions, newest first."""
        with self._connect("Subscription listing") as conn:
            rows = conn.execute(
                "SELECT guild_id, start_date, duration_days FROM subscriptions "
                "ORDER BY start_date DESC"
            ).fetchall()
        return [self._row_to_subscription(row) for row in rows]

    # Permissions

    def get_permission(self, guild_id: str, user_id: str) -> Optional[Permission]:
        """Get the permission record for a (guild, user) pair."""
        with self._connect(f"Permission lookup for user {user_id} in guild {guild_id}") as conn:
            row = conn.execute(
                "SELECT guild_id, user_id, can_add_time, can_remove_time FROM permissions "
                "WHERE guild_id = ? AND user_id = ?",
                (guild_id, user_id),
            ).fetchone()
        return self._row_to_permission(row) if row else None

    def upsert_permission(self, permission: Permission) -> Permission:
        """Insert a permission record or replace both flags of the existing one."""
        with self._connect(
            f"Permission grant for user {permission.user_id} in guild {permission.guild_id}"
        ) as conn:
            conn.execute(
                """
                INSERT INTO permissions (guild_id, user_id, can_add_time, can_remove_time)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (guild_id, user_id) DO UPDATE SET
                    can_add_time = excluded.can_add_time,
                    can_remove_time = excluded.can_remove_time
                """,
                (
                    permission.guild_id,
                    permission.user_id,
                    int(permission.can_add_time),
                    int(permission.can_remove_time),
                ),
            )

        logger.info(
            f"Stored permission for user {permission.user_id} in guild {permission.guild_id}: "
            f"add={permission.can_add_time} remove={permission.can_remove_time}"
        )
        return permission

    def delete_permission(self, guild_id: str, user_id: str) -> bool:
        """Delete a permission record. Returns whether a record existed."""
        with self._connect(f"Permission revoke for user {user_id} in guild {guild_id}") as conn:
            cursor = conn.execute(
                "DELETE FROM permissions WHERE guild_id = ? AND user_id = ?",
                (guild_id, user_id),
            )
            deleted = cursor.rowcount > 0

        logger.info(
            f"Revoked permission for user {user_id} in guild {guild_id}"
            if deleted
            else f"No permission to revoke for user {user_id} in guild {guild_id}"
        )
        return deleted

    def list_permissions(self, guild_id: str) -> List[Permission]:
        """List permission records of a guild."""
        with self._connect(f"Permission listing for guild {guild_id}") as conn:
            rows = conn.execute(
                "SELECT guild_id, user_id, can_add_time, can_remove_time FROM permissions "
                "WHERE guild_id = ? ORDER BY user_id",
                (guild_id,),
            ).fetchall()
        return [self._row_to_permission(row) for row in rows]
