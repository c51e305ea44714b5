"""Persistence layer (repositories, etc.)."""

from hyperliquid_wallet_tracker.persistence.repositories import (
    InMemoryProcessedEventRepository,
    InMemorySubscriptionRepository,
    IProcessedEventRepository,
    ISubscriptionRepository,
    SqliteDatabase,
    SqliteProcessedEventRepository,
    SqliteSubscriptionRepository,
)

__all__ = [
    "IProcessedEventRepository",
    "ISubscriptionRepository",
    "InMemoryProcessedEventRepository",
    "InMemorySubscriptionRepository",
    "SqliteDatabase",
    "SqliteProcessedEventRepository",
    "SqliteSubscriptionRepository",
]
