# -*- coding: utf-8 -*-
"""Application services."""

from hyperliquid_wallet_tracker.services.dispatch import DispatchResult, NotificationDispatcher
from hyperliquid_wallet_tracker.services.markets import MarketListingDetector, NewListingNotifier
from hyperliquid_wallet_tracker.services.monitoring import (
    EventSourceAdapter,
    PollScheduler,
    SchedulerContext,
    SlicedOrderAggregator,
    WalletSweepResult,
)
from hyperliquid_wallet_tracker.services.status import WalletStatusService
from hyperliquid_wallet_tracker.services.subscriptions import SubscriptionService

__all__ = [
    "DispatchResult",
    "EventSourceAdapter",
    "MarketListingDetector",
    "NewListingNotifier",
    "NotificationDispatcher",
    "PollScheduler",
    "SchedulerContext",
    "SlicedOrderAggregator",
    "SubscriptionService",
    "WalletStatusService",
    "WalletSweepResult",
]
