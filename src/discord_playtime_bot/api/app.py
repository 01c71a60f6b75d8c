"""
FastAPI application for subscription administration.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from discord_playtime_bot import __version__
from discord_playtime_bot.infrastructure import (
    InvalidParametersError,
    StorageError,
    SubscriptionNotFoundError,
)
from discord_playtime_bot.subscription import Permission, Subscription, SubscriptionManager
from discord_playtime_bot.subscription.models import utc_now

logger = logging.getLogger("api.app")


class SubscriptionResponse(BaseModel):
    """Response model for subscription data."""

    guild_id: str
    start_date: datetime
    duration_days: int
    expiry: datetime
    expired: bool
    remaining_days: int

    @classmethod
    def from_subscription(cls, subscription: Subscription) -> "SubscriptionResponse":
        now = utc_now()
        return cls(
            guild_id=subscription.guild_id,
            start_date=subscription.start_date,
            duration_days=subscription.duration_days,
            expiry=subscription.expiry,
            expired=subscription.is_expired(now),
            remaining_days=subscription.remaining_days(now),
        )


class ExtendRequest(BaseModel):
    """Request model for extending a subscription."""

    days: int = Field(..., description="Number of days to add, must be positive")


class PermissionResponse(BaseModel):
    """Response model for a permission record."""

    guild_id: str
    user_id: str
    can_add_time: bool
    can_remove_time: bool

    @classmethod
    def from_permission(cls, permission: Permission) -> "PermissionResponse":
        return cls(
            guild_id=permission.guild_id,
            user_id=permission.user_id,
            can_add_time=permission.can_add_time,
            can_remove_time=permission.can_remove_time,
        )


def create_app(
    db_path: str = "data/playtime.db",
    api_key: Optional[str] = None,
    subscription_manager: Optional[SubscriptionManager] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        db_path: Path to the subscription database
        api_key: If set, every /subscriptions route requires a matching
            ``X-API-Key`` header
        subscription_manager: Pre-built manager, mainly for tests

    Returns:
        Configured FastAPI application
    """
    manager = subscription_manager or SubscriptionManager(db_path=db_path)

    app = FastAPI(
        title="Discord Playtime Bot API",
        description="REST API for administering Discord Playtime Bot subscriptions",
        version=__version__,
    )
    app.state.subscription_manager = manager

    def get_subscription_manager() -> SubscriptionManager:
        return app.state.subscription_manager

    async def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
        if api_key is not None and x_api_key != api_key:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Subscription store unavailable"},
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "Discord Playtime Bot API", "version": __version__}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get(
        "/subscriptions",
        response_model=List[SubscriptionResponse],
        dependencies=[Depends(require_api_key)],
    )
    async def list_subscriptions(manager: SubscriptionManager = Depends(get_subscription_manager)):
        """List all subscriptions."""
        subscriptions = await manager.list_subscriptions()
        return [SubscriptionResponse.from_subscription(sub) for sub in subscriptions]

    @app.get(
        "/subscriptions/{guild_id}",
        response_model=SubscriptionResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def get_subscription(
        guild_id: str, manager: SubscriptionManager = Depends(get_subscription_manager)
    ):
        """Get subscription by guild ID."""
        subscription = await manager.get_subscription(guild_id)
        if subscription is None:
            raise HTTPException(status_code=404, detail="Subscription not found")
        return SubscriptionResponse.from_subscription(subscription)

    @app.post(
        "/subscriptions/{guild_id}",
        response_model=SubscriptionResponse,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_api_key)],
    )
    async def bootstrap_subscription(
        guild_id: str, manager: SubscriptionManager = Depends(get_subscription_manager)
    ):
        """Create a zero-day subscription for a guild that has none."""
        if not await manager.bootstrap_guild(guild_id):
            raise HTTPException(status_code=409, detail="Subscription already exists")
        subscription = await manager.get_subscription(guild_id)
        return SubscriptionResponse.from_subscription(subscription)

    @app.post(
        "/subscriptions/{guild_id}/extend",
        response_model=SubscriptionResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def extend_subscription(
        guild_id: str,
        request: ExtendRequest,
        manager: SubscriptionManager = Depends(get_subscription_manager),
    ):
        """Add days to a guild's subscription."""
        try:
            subscription = await manager.extend_subscription(guild_id, request.days)
        except InvalidParametersError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SubscriptionNotFoundError:
            raise HTTPException(status_code=404, detail="Subscription not found")

        logger.info(f"Extended subscription for guild {guild_id} by {request.days} days via API")
        return SubscriptionResponse.from_subscription(subscription)

    @app.delete("/subscriptions/{guild_id}", dependencies=[Depends(require_api_key)])
    async def delete_subscription(
        guild_id: str, manager: SubscriptionManager = Depends(get_subscription_manager)
    ):
        """Delete a guild's subscription."""
        if not await manager.delete_subscription(guild_id):
            raise HTTPException(status_code=404, detail="Subscription not found")
        return {"message": "Subscription deleted successfully"}

    @app.get(
        "/subscriptions/{guild_id}/permissions",
        response_model=List[PermissionResponse],
        dependencies=[Depends(require_api_key)],
    )
    async def list_permissions(
        guild_id: str, manager: SubscriptionManager = Depends(get_subscription_manager)
    ):
        """List the permission records of a guild."""
        permissions = await manager.list_permissions(guild_id)
        return [PermissionResponse.from_permission(p) for p in permissions]

    return app
