"""
Unit tests for the AccessGate core component.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from discord_playtime_bot.core.access_gate import AccessGate
from discord_playtime_bot.core.types import (
    COMMAND_CATALOG,
    MSG_OWNER_ONLY,
    MSG_STORAGE_ERROR,
    MSG_SUBSCRIPTION_EXPIRED,
    MSG_UNAUTHORIZED,
    DenialReason,
)
from discord_playtime_bot.infrastructure import StorageError
from tests.conftest import GUILD_ID, MEMBER_ID, OWNER_ID, START, after


class TestSubscriptionChecks:
    """Subscription lookup and expiry."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", [spec.name for spec in COMMAND_CATALOG])
    async def test_missing_subscription_denies_every_command(self, access_gate, command):
        decision = await access_gate.evaluate(GUILD_ID, OWNER_ID, command, now=START)

        assert not decision
        assert decision.reason is DenialReason.SUBSCRIPTION_NOT_FOUND

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exact_expiry_is_still_active(self, access_gate, seed_subscription):
        seed_subscription(days=30)

        decision = await access_gate.evaluate(
            GUILD_ID, MEMBER_ID, "checksubscription", now=after(30)
        )

        assert decision.allowed
        assert decision.snapshot.remaining_days == 0
        assert decision.snapshot.expiry == after(30)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_one_tick_after_expiry_is_expired(self, access_gate, seed_subscription):
        seed_subscription(days=30)

        decision = await access_gate.evaluate(
            GUILD_ID, MEMBER_ID, "checksubscription", now=after(30, microseconds=1)
        )

        assert decision.reason is DenialReason.SUBSCRIPTION_EXPIRED
        assert decision.message == MSG_SUBSCRIPTION_EXPIRED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fresh_guild_is_active_only_at_its_start_instant(
        self, access_gate, seed_subscription
    ):
        seed_subscription(days=0)

        at_start = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "checksubscription", now=START)
        later = await access_gate.evaluate(
            GUILD_ID, MEMBER_ID, "checksubscription", now=after(seconds=1)
        )

        assert at_start.allowed
        assert later.reason is DenialReason.SUBSCRIPTION_EXPIRED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_expiry_checked_before_owner_authorization(self, access_gate, seed_subscription):
        seed_subscription(days=1)

        decision = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "extendtime", now=after(2))

        assert decision.reason is DenialReason.SUBSCRIPTION_EXPIRED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_storage_failure_is_never_allowed(self, subscription_manager):
        subscription_manager.get_subscription = AsyncMock(side_effect=StorageError("disk gone"))
        gate = AccessGate(subscription_manager, owner_id=OWNER_ID)

        decision = await gate.evaluate(GUILD_ID, OWNER_ID, "checksubscription", now=START)

        assert not decision
        assert decision.reason is DenialReason.STORAGE_ERROR
        assert decision.message == MSG_STORAGE_ERROR

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_remaining_days_rounds_up(self, access_gate, seed_subscription):
        seed_subscription(days=10)

        decision = await access_gate.evaluate(
            GUILD_ID, MEMBER_ID, "checksubscription", now=after(2.5)
        )

        assert decision.snapshot.remaining_days == 8

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_command(self, access_gate, seed_subscription):
        seed_subscription(days=10)

        decision = await access_gate.evaluate(GUILD_ID, OWNER_ID, "selfdestruct", now=START)

        assert decision.reason is DenialReason.COMMAND_NOT_FOUND


class TestCommandAuthorization:
    """Owner-only and permission-gated commands."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "command", ["extendtime", "grantaccess", "revokeaccess", "resetallplaytimes"]
    )
    async def test_owner_only_commands(self, access_gate, seed_subscription, command):
        seed_subscription(days=10)

        owner = await access_gate.evaluate(GUILD_ID, OWNER_ID, command, now=after(1))
        member = await access_gate.evaluate(GUILD_ID, MEMBER_ID, command, now=after(1))

        assert owner.allowed
        assert member.reason is DenialReason.PERMISSION_DENIED
        assert member.message == MSG_OWNER_ONLY

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_permission_gated_without_record(self, access_gate, seed_subscription):
        seed_subscription(days=10)

        decision = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "addtime", now=after(1))

        assert decision.reason is DenialReason.PERMISSION_DENIED
        assert decision.message == MSG_UNAUTHORIZED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_permission_flags_are_independent(
        self, access_gate, seed_subscription, subscription_manager
    ):
        seed_subscription(days=10)
        await subscription_manager.grant_access(GUILD_ID, MEMBER_ID, True, False)

        add = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "addtime", now=after(1))
        remove = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "removeplaytime", now=after(1))
        reset = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "resetplaytime", now=after(1))

        assert add.allowed
        assert remove.reason is DenialReason.PERMISSION_DENIED
        assert reset.reason is DenialReason.PERMISSION_DENIED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_permission_is_inert_once_subscription_expires(
        self, access_gate, seed_subscription, subscription_manager
    ):
        seed_subscription(days=1)
        await subscription_manager.grant_access(GUILD_ID, MEMBER_ID, True, True)

        decision = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "addtime", now=after(3))

        assert decision.reason is DenialReason.SUBSCRIPTION_EXPIRED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_permission_lookup_failure(self, subscription_manager, seed_subscription):
        seed_subscription(days=10)
        subscription_manager.get_permission = AsyncMock(side_effect=StorageError("locked"))
        gate = AccessGate(subscription_manager, owner_id=OWNER_ID)

        decision = await gate.evaluate(GUILD_ID, MEMBER_ID, "addtime", now=after(1))

        assert decision.reason is DenialReason.STORAGE_ERROR

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_subscription_active_commands_need_no_permission(
        self, access_gate, seed_subscription
    ):
        seed_subscription(days=10)

        decision = await access_gate.evaluate(GUILD_ID, MEMBER_ID, "listtimes", now=after(1))

        assert decision.allowed

    @pytest.mark.unit
    def test_authorize_owner_compares_identities(self, subscription_manager):
        gate = AccessGate(subscription_manager, owner_id=int(OWNER_ID))

        assert gate.authorize_owner(OWNER_ID)
        assert gate.authorize_owner(int(OWNER_ID))
        assert not gate.authorize_owner(MEMBER_ID)


class TestOwnerExpiryBypass:
    """Deployment policy letting the owner act on expired subscriptions."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_owner_may_extend_expired_subscription(
        self, subscription_manager, seed_subscription
    ):
        seed_subscription(days=0)
        gate = AccessGate(subscription_manager, owner_id=OWNER_ID, owner_bypasses_expiry=True)

        decision = await gate.evaluate(GUILD_ID, OWNER_ID, "extendtime", now=after(5))

        assert decision.allowed
        assert decision.snapshot.remaining_days == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bypass_does_not_cover_other_callers_or_commands(
        self, subscription_manager, seed_subscription
    ):
        seed_subscription(days=0)
        gate = AccessGate(subscription_manager, owner_id=OWNER_ID, owner_bypasses_expiry=True)
        now = START + timedelta(days=5)

        member = await gate.evaluate(GUILD_ID, MEMBER_ID, "extendtime", now=now)
        status = await gate.evaluate(GUILD_ID, OWNER_ID, "checksubscription", now=now)

        assert member.reason is DenialReason.SUBSCRIPTION_EXPIRED
        assert status.reason is DenialReason.SUBSCRIPTION_EXPIRED
