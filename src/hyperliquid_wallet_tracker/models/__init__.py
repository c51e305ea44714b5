# -*- coding: utf-8 -*-
"""Domain models."""

from hyperliquid_wallet_tracker.models.activity import (
    Activity,
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
    StakingKind,
    TradeSide,
    is_spot_coin,
)
from hyperliquid_wallet_tracker.models.market import MarketListing, MarketListingDiff
from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent
from hyperliquid_wallet_tracker.models.sliced_order import (
    SlicedOrderPhase,
    SlicedOrderState,
    SlicedOrderTransition,
)
from hyperliquid_wallet_tracker.models.subscription import (
    Subscriber,
    TrackedWallet,
    TrackerStatistics,
    WalletSubscriber,
)
from hyperliquid_wallet_tracker.models.wallet_status import OpenPosition, WalletStatus

__all__ = [
    "Activity",
    "Fill",
    "MarketListing",
    "MarketListingDiff",
    "OpenPosition",
    "OrderEvent",
    "ProcessedEvent",
    "SlicedFill",
    "SlicedOrderPhase",
    "SlicedOrderState",
    "SlicedOrderTransition",
    "StakingEvent",
    "StakingKind",
    "Subscriber",
    "TrackedWallet",
    "TrackerStatistics",
    "TradeSide",
    "WalletStatus",
    "WalletSubscriber",
    "is_spot_coin",
]
