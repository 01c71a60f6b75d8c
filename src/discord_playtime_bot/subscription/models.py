"""
Subscription and permission data models for the Discord Playtime Bot.

All timestamps are timezone-aware UTC. Durations are whole days added to the
start timestamp, with no timezone or daylight-saving adjustment.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from discord_playtime_bot.core.types import Capability

ONE_DAY = timedelta(days=1)

# Upper bound on a subscription's total length (roughly 2700 years), keeping
# every expiry well inside the datetime range.
MAX_DURATION_DAYS = 1_000_000


def utc_now() -> datetime:
    """Return current UTC time with tzinfo."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Subscription:
    """Guild subscription data model."""

    guild_id: str
    start_date: datetime = field(default_factory=utc_now)
    duration_days: int = 0

    @property
    def expiry(self) -> datetime:
        """
        Instant after which the subscription is expired.

        Raises:
            OverflowError: If the duration reaches past ``datetime.max``
        """
        return ensure_utc(self.start_date) + timedelta(days=self.duration_days)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """The expiry instant itself still counts as active."""
        now = ensure_utc(now) if now is not None else utc_now()
        return now > self.expiry

    def remaining_days(self, now: Optional[datetime] = None) -> int:
        """Whole days left, rounded up and never negative."""
        now = ensure_utc(now) if now is not None else utc_now()
        remaining = (self.expiry - now) / ONE_DAY
        return max(0, math.ceil(remaining))


@dataclass
class Permission:
    """Per-user, per-guild capability grant."""

    guild_id: str
    user_id: str
    can_add_time: bool = False
    can_remove_time: bool = False

    @property
    def is_inert(self) -> bool:
        """A record with no flags set grants nothing."""
        return not (self.can_add_time or self.can_remove_time)

    def allows(self, capability: Capability) -> bool:
        if capability is Capability.ADD_TIME:
            return self.can_add_time
        return self.can_remove_time
