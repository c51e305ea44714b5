"""In-memory repository implementations."""

from hyperliquid_wallet_tracker.persistence.repositories.in_memory.processed_event_repository import (
    InMemoryProcessedEventRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.in_memory.subscription_repository import (
    InMemorySubscriptionRepository,
)

__all__ = [
    "InMemoryProcessedEventRepository",
    "InMemorySubscriptionRepository",
]
