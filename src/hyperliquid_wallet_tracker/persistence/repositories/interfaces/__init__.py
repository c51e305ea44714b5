# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/ and sqlite/."""

from hyperliquid_wallet_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.interfaces.subscription_repository import (
    ISubscriptionRepository,
)

__all__ = [
    "IProcessedEventRepository",
    "ISubscriptionRepository",
]
