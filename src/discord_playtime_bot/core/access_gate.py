"""
Access Gate for the Discord Playtime Bot.

Every slash command passes through :meth:`AccessGate.evaluate` before its
handler runs. The gate checks, in order:

- the guild has a subscription record
- the subscription has not expired
- the caller is allowed to run this particular command

The gate only reads state. Extending subscriptions and granting or revoking
permissions are separate operations that the gate's decision permits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from discord_playtime_bot.core.types import (
    DENIAL_MESSAGES,
    MSG_OWNER_ONLY,
    AuthClass,
    CommandSpec,
    DenialReason,
    get_command,
)
from discord_playtime_bot.infrastructure import StorageError, setup_logging

if TYPE_CHECKING:
    from discord_playtime_bot.subscription import Subscription, SubscriptionManager

logger = setup_logging("access_gate")


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """Subscription state computed once by the gate for the command body."""

    guild_id: str
    expiry: datetime
    remaining_days: int


@dataclass(frozen=True)
class Decision:
    """Outcome of an access evaluation."""

    allowed: bool
    reason: Optional[DenialReason] = None
    message: Optional[str] = None
    snapshot: Optional[SubscriptionSnapshot] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, snapshot: SubscriptionSnapshot) -> "Decision":
        return cls(allowed=True, snapshot=snapshot)

    @classmethod
    def deny(cls, reason: DenialReason, message: Optional[str] = None) -> "Decision":
        return cls(allowed=False, reason=reason, message=message or DENIAL_MESSAGES[reason])


class AccessGate:
    """Decides whether a command may run for a caller in a guild."""

    def __init__(
        self,
        subscription_manager: "SubscriptionManager",
        owner_id: str,
        owner_bypasses_expiry: bool = False,
    ):
        """
        Args:
            subscription_manager: Read access to subscriptions and permissions
            owner_id: The single identity allowed to run owner-only commands
            owner_bypasses_expiry: Let the owner run owner-only commands on an
                expired subscription (e.g. to extend a freshly joined guild)
        """
        self.subscription_manager = subscription_manager
        self._owner_id = str(owner_id)
        self.owner_bypasses_expiry = owner_bypasses_expiry

        logger.info(
            f"AccessGate initialized: owner={self._owner_id} "
            f"owner_bypasses_expiry={self.owner_bypasses_expiry}"
        )

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def authorize_owner(self, caller_id: str) -> bool:
        """Owner check as a pure function of the caller and configured owner."""
        return str(caller_id) == self._owner_id

    async def evaluate(
        self,
        guild_id: str,
        caller_id: str,
        command_name: str,
        now: Optional[datetime] = None,
    ) -> Decision:
        """
        Evaluate whether ``caller_id`` may run ``command_name`` in ``guild_id``.

        Args:
            guild_id: Discord guild ID
            caller_id: Discord user ID of the invoker
            command_name: Slash command name from the catalog
            now: Evaluation instant, defaults to the current UTC time

        Returns:
            Decision: allowed with a subscription snapshot, or denied with a
            reason and a user-facing message
        """
        spec = get_command(command_name)
        if spec is None:
            logger.warning(f"Unknown command '{command_name}' in guild {guild_id}")
            return Decision.deny(DenialReason.COMMAND_NOT_FOUND)

        try:
            subscription = await self.subscription_manager.get_subscription(guild_id)
        except StorageError as e:
            logger.error(f"Subscription lookup failed for guild {guild_id}: {e}")
            return Decision.deny(DenialReason.STORAGE_ERROR)

        if subscription is None:
            logger.info(f"No subscription for guild {guild_id}, denying /{command_name}")
            return Decision.deny(DenialReason.SUBSCRIPTION_NOT_FOUND)

        if subscription.is_expired(now) and not self._may_bypass_expiry(spec, caller_id):
            logger.info(f"Subscription expired for guild {guild_id}, denying /{command_name}")
            return Decision.deny(DenialReason.SUBSCRIPTION_EXPIRED)

        denial = await self._authorize_command(spec, guild_id, caller_id)
        if denial is not None:
            return denial

        return Decision.allow(self._snapshot(subscription, now))

    def _may_bypass_expiry(self, spec: CommandSpec, caller_id: str) -> bool:
        return (
            self.owner_bypasses_expiry
            and spec.auth is AuthClass.OWNER_ONLY
            and self.authorize_owner(caller_id)
        )

    async def _authorize_command(
        self, spec: CommandSpec, guild_id: str, caller_id: str
    ) -> Optional[Decision]:
        """Return a denial for this command, or None if the caller may run it."""
        if spec.auth is AuthClass.OWNER_ONLY:
            if self.authorize_owner(caller_id):
                return None
            logger.info(f"User {caller_id} is not the owner, denying /{spec.name}")
            return Decision.deny(DenialReason.PERMISSION_DENIED, MSG_OWNER_ONLY)

        if spec.auth is AuthClass.PERMISSION_GATED:
            try:
                permission = await self.subscription_manager.get_permission(guild_id, caller_id)
            except StorageError as e:
                logger.error(
                    f"Permission lookup failed for user {caller_id} in guild {guild_id}: {e}"
                )
                return Decision.deny(DenialReason.STORAGE_ERROR)

            if permission is None or not permission.allows(spec.capability):
                logger.info(
                    f"User {caller_id} lacks {spec.capability.value} in guild {guild_id}, "
                    f"denying /{spec.name}"
                )
                return Decision.deny(DenialReason.PERMISSION_DENIED)

        return None

    @staticmethod
    def _snapshot(subscription: "Subscription", now: Optional[datetime]) -> SubscriptionSnapshot:
        return SubscriptionSnapshot(
            guild_id=subscription.guild_id,
            expiry=subscription.expiry,
            remaining_days=subscription.remaining_days(now),
        )
