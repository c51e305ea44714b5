"""Subscription management."""

from hyperliquid_wallet_tracker.services.subscriptions.subscription_service import (
    SubscriptionService,
)

__all__ = ["SubscriptionService"]
