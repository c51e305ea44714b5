# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, sqlite)."""

from hyperliquid_wallet_tracker.persistence.repositories.interfaces import (
    IProcessedEventRepository,
    ISubscriptionRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemorySubscriptionRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.sqlite import (
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
