"""Abstract interface for the subscription directory (subscribers and tracked wallets)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from hyperliquid_wallet_tracker.models.subscription import (
    Subscriber,
    TrackedWallet,
    TrackerStatistics,
    WalletSubscriber,
)


class ISubscriptionRepository(ABC):
    """Interface for persisting subscribers and the wallets they follow.

    Addresses are stored lowercased. Removing a wallet deactivates the row;
    adding it again re-activates it.
    """

    @abstractmethod
    async def add_subscriber(self, subscriber: Subscriber) -> None:
        """Register a subscriber. No-op if the id already exists."""
        ...

    @abstractmethod
    async def get_subscriber(self, subscriber_id: str) -> Subscriber | None:
        ...

    @abstractmethod
    async def list_active_subscribers(self) -> list[Subscriber]:
        """Every active subscriber of the system (broadcast audience)."""
        ...

    @abstractmethod
    async def add_wallet(self, wallet: TrackedWallet) -> TrackedWallet:
        """Insert or re-activate (subscriber_id, address); the nickname is replaced."""
        ...

    @abstractmethod
    async def deactivate_wallet(self, subscriber_id: str, address: str) -> bool:
        """Deactivate a subscription. Returns False if it was not active."""
        ...

    @abstractmethod
    async def count_active_wallets(self, subscriber_id: str) -> int:
        ...

    @abstractmethod
    async def list_wallets(self, subscriber_id: str) -> list[TrackedWallet]:
        """Active wallets of one subscriber, oldest first."""
        ...

    @abstractmethod
    async def list_active_wallet_addresses(self) -> list[str]:
        """Distinct addresses with at least one active subscription."""
        ...

    @abstractmethod
    async def subscribers_of(self, address: str) -> list[WalletSubscriber]:
        """Active subscribers following ``address``, with their nickname for it."""
        ...

    @abstractmethod
    async def statistics(
        self,
        *,
        now: datetime | None = None,
        events_processed_today: int = 0,
    ) -> TrackerStatistics:
        """Aggregate usage numbers. ``events_processed_today`` comes from the dedup store."""
        ...
