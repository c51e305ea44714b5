# -*- coding: utf-8 -*-
"""Unit tests for SubscriptionService."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import pytest

from hyperliquid_wallet_tracker.exceptions import (
    InvalidWalletAddressError,
    WalletLimitExceededError,
)
from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent
from hyperliquid_wallet_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemorySubscriptionRepository,
)
from hyperliquid_wallet_tracker.services.subscriptions import SubscriptionService


def _address(i: int) -> str:
    return "0x" + f"{i:040x}"


@pytest.fixture
def service(
    settings: Any,
    subscription_repo: InMemorySubscriptionRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> SubscriptionService:
    return SubscriptionService(subscription_repo, processed_repo, settings)


async def test_add_wallet_normalizes_and_registers_subscriber(
    service: SubscriptionService,
    subscription_repo: InMemorySubscriptionRepository,
) -> None:
    wallet = await service.add_wallet("42", "0x" + "AB" * 20, nickname="  Whale ", username="bob")

    assert wallet.address == "0x" + "ab" * 20
    assert wallet.nickname == "Whale"
    subscriber = await subscription_repo.get_subscriber("42")
    assert subscriber is not None
    assert subscriber.username == "bob"
    assert await subscription_repo.list_active_wallet_addresses() == ["0x" + "ab" * 20]


@pytest.mark.parametrize("address", ["", "0x123", "hello", "0x" + "z" * 40])
async def test_add_wallet_rejects_invalid_address(service: SubscriptionService, address: str) -> None:
    with pytest.raises(InvalidWalletAddressError):
        await service.add_wallet("42", address)


async def test_sixth_wallet_is_rejected(service: SubscriptionService) -> None:
    for i in range(5):
        await service.add_wallet("42", _address(i))

    with pytest.raises(WalletLimitExceededError):
        await service.add_wallet("42", _address(5))
    assert len(await service.list_wallets("42")) == 5


async def test_re_adding_tracked_wallet_at_limit_updates_nickname(service: SubscriptionService) -> None:
    for i in range(5):
        await service.add_wallet("42", _address(i))

    updated = await service.add_wallet("42", _address(0), nickname="renamed")

    assert updated.nickname == "renamed"
    assert len(await service.list_wallets("42")) == 5


async def test_remove_wallet_frees_a_slot(service: SubscriptionService) -> None:
    for i in range(5):
        await service.add_wallet("42", _address(i))

    assert await service.remove_wallet("42", _address(0)) is True
    assert await service.remove_wallet("42", _address(0)) is False
    await service.add_wallet("42", _address(9))
    assert len(await service.list_wallets("42")) == 5


async def test_limit_is_per_subscriber(service: SubscriptionService) -> None:
    for i in range(5):
        await service.add_wallet("a", _address(i))

    await service.add_wallet("b", _address(0))
    assert len(await service.list_wallets("b")) == 1


async def test_statistics_counts_events_of_last_day(
    service: SubscriptionService,
    processed_repo: InMemoryProcessedEventRepository,
    now_utc: datetime,
    wallet: str,
) -> None:
    await service.add_wallet("a", _address(1))
    await service.add_wallet("a", _address(2))
    await service.add_wallet("b", _address(1))
    await processed_repo.add(ProcessedEvent.create(wallet, "e1", processed_at=now_utc - timedelta(hours=1)))
    await processed_repo.add(ProcessedEvent.create(wallet, "e2", processed_at=now_utc - timedelta(days=2)))

    stats = await service.statistics(now=now_utc)

    assert stats.events_processed_today == 1
    assert stats.total_tracked_wallets == 3
    assert stats.unique_tracked_wallets == 2
    assert stats.avg_wallets_per_subscriber == 1.5
