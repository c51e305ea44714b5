"""SQLite repository implementations."""

from hyperliquid_wallet_tracker.persistence.repositories.sqlite.database import SqliteDatabase
from hyperliquid_wallet_tracker.persistence.repositories.sqlite.processed_event_repository import (
    SqliteProcessedEventRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.sqlite.subscription_repository import (
    SqliteSubscriptionRepository,
)

__all__ = [
    "SqliteDatabase",
    "SqliteProcessedEventRepository",
    "SqliteSubscriptionRepository",
]
