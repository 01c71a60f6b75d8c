"""
Subscription management module for the Discord Playtime Bot.

This module handles guild subscriptions, per-user permission records and
their persistence.
"""

from .subscription_manager import SubscriptionManager
from .models import Permission, Subscription

__all__ = ["SubscriptionManager", "Subscription", "Permission"]
