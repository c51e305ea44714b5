# -*- coding: utf-8 -*-
"""In-memory subscription directory."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

from hyperliquid_wallet_tracker.models.subscription import (
    Subscriber,
    TrackedWallet,
    TrackerStatistics,
    WalletSubscriber,
)
from hyperliquid_wallet_tracker.persistence.repositories.interfaces.subscription_repository import (
    ISubscriptionRepository,
)


def _addr(address: str) -> str:
    return address.strip().lower()


class InMemorySubscriptionRepository(ISubscriptionRepository):
    """In-memory implementation of ISubscriptionRepository."""

    def __init__(self) -> None:
        self._subscribers: dict[str, Subscriber] = {}
        # Insertion order doubles as creation order.
        self._wallets: dict[tuple[str, str], TrackedWallet] = {}

    async def add_subscriber(self, subscriber: Subscriber) -> None:
        self._subscribers.setdefault(subscriber.subscriber_id, subscriber)

    async def get_subscriber(self, subscriber_id: str) -> Subscriber | None:
        return self._subscribers.get(subscriber_id)

    async def list_active_subscribers(self) -> list[Subscriber]:
        return [s for s in self._subscribers.values() if s.active]

    async def add_wallet(self, wallet: TrackedWallet) -> TrackedWallet:
        stored = replace(
            wallet,
            address=_addr(wallet.address),
            active=True,
            created_at=wallet.created_at or datetime.now(UTC),
        )
        key = (stored.subscriber_id, stored.address)
        # Re-adding moves the row to the end, like INSERT OR REPLACE.
        self._wallets.pop(key, None)
        self._wallets[key] = stored
        return stored

    async def deactivate_wallet(self, subscriber_id: str, address: str) -> bool:
        key = (subscriber_id, _addr(address))
        current = self._wallets.get(key)
        if current is None or not current.active:
            return False
        self._wallets[key] = replace(current, active=False)
        return True

    async def count_active_wallets(self, subscriber_id: str) -> int:
        return len(await self.list_wallets(subscriber_id))

    async def list_wallets(self, subscriber_id: str) -> list[TrackedWallet]:
        return [
            w for w in self._wallets.values() if w.subscriber_id == subscriber_id and w.active
        ]

    async def list_active_wallet_addresses(self) -> list[str]:
        return list(dict.fromkeys(w.address for w in self._wallets.values() if w.active))

    async def subscribers_of(self, address: str) -> list[WalletSubscriber]:
        address = _addr(address)
        result: list[WalletSubscriber] = []
        for w in self._wallets.values():
            if w.address != address or not w.active:
                continue
            subscriber = self._subscribers.get(w.subscriber_id)
            if subscriber is None or not subscriber.active:
                continue
            result.append(WalletSubscriber(subscriber_id=w.subscriber_id, nickname=w.nickname))
        return result

    async def statistics(
        self,
        *,
        now: datetime | None = None,
        events_processed_today: int = 0,
    ) -> TrackerStatistics:
        now = now or datetime.now(UTC)
        subscribers = [s for s in self._subscribers.values() if s.active]
        wallets = [w for w in self._wallets.values() if w.active]
        owners = {w.subscriber_id for w in wallets}

        def _created_since(s: Subscriber, delta: timedelta) -> bool:
            return s.created_at is not None and s.created_at >= now - delta

        return TrackerStatistics(
            total_subscribers=len(subscribers),
            new_subscribers_today=sum(1 for s in subscribers if _created_since(s, timedelta(days=1))),
            new_subscribers_this_week=sum(
                1 for s in subscribers if _created_since(s, timedelta(days=7))
            ),
            total_tracked_wallets=len(wallets),
            unique_tracked_wallets=len({w.address for w in wallets}),
            avg_wallets_per_subscriber=round(len(wallets) / len(owners), 2) if owners else 0.0,
            events_processed_today=events_processed_today,
        )
