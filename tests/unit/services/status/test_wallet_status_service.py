# -*- coding: utf-8 -*-
"""Unit tests for WalletStatusService."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from hyperliquid_wallet_tracker.exceptions import (
    HyperliquidAPIError,
    InvalidWalletAddressError,
    WalletNotTrackedError,
)
from hyperliquid_wallet_tracker.models.activity import Activity, Fill
from hyperliquid_wallet_tracker.models.subscription import Subscriber, TrackedWallet
from hyperliquid_wallet_tracker.persistence.repositories.in_memory import (
    InMemorySubscriptionRepository,
)
from hyperliquid_wallet_tracker.services.status import WalletStatusService

_NOW_MS = 1_700_000_000_000


class _FakeEventSource:
    def __init__(self, activities: list[Activity]) -> None:
        self.activities = activities
        self.calls: list[tuple[str, int]] = []

    async def fetch_activity(self, wallet: str, since_ms: int) -> list[Activity]:
        self.calls.append((wallet, since_ms))
        return [a for a in self.activities if a.time > since_ms]


class _FakeInfoApi:
    def __init__(self) -> None:
        self.state: dict[str, Any] | None = {
            "marginSummary": {"accountValue": "13109.48"},
            "assetPositions": [
                {"position": {"coin": "ETH", "szi": "-0.5", "entryPx": "3000", "unrealizedPnl": "12.5"}},
                {"position": {"coin": "BTC", "szi": "0.0", "unrealizedPnl": "0"}},
            ],
        }
        self.orders: list[dict[str, Any]] = [{"coin": "ETH", "oid": 1}, {"coin": "BTC", "oid": 2}]
        self.summary: dict[str, Any] | None = {"delegated": "250.5"}
        self.failing: set[str] = set()

    def _maybe_fail(self, name: str) -> None:
        if name in self.failing:
            raise HyperliquidAPIError(f"{name} failed", status_code=502)

    async def clearinghouse_state(self, user: str) -> dict[str, Any] | None:
        self._maybe_fail("state")
        return self.state

    async def open_orders(self, user: str) -> list[dict[str, Any]]:
        self._maybe_fail("orders")
        return self.orders

    async def delegator_summary(self, user: str) -> dict[str, Any] | None:
        self._maybe_fail("summary")
        return self.summary


async def _tracking(repo: InMemorySubscriptionRepository, wallet: str, nickname: str | None = None) -> None:
    await repo.add_subscriber(Subscriber.create("alice"))
    await repo.add_wallet(TrackedWallet(subscriber_id="alice", address=wallet, nickname=nickname))


def _service(
    settings: Any,
    repo: InMemorySubscriptionRepository,
    source: _FakeEventSource,
    info: _FakeInfoApi,
) -> WalletStatusService:
    return WalletStatusService(
        repo,
        source,  # type: ignore[arg-type]
        info,  # type: ignore[arg-type]
        settings,
        clock=lambda: _NOW_MS,
    )


async def test_status_combines_activity_and_positions(
    settings: Any,
    wallet: str,
    subscription_repo: InMemorySubscriptionRepository,
    fill_factory: Callable[..., Fill],
) -> None:
    await _tracking(subscription_repo, wallet, nickname="whale")
    source = _FakeEventSource(
        [
            fill_factory(time=_NOW_MS - 1_000, trade_id="1"),
            fill_factory(time=_NOW_MS - 5_000, trade_id="2"),
            fill_factory(time=_NOW_MS - 90_000_000, trade_id="3"),
        ]
    )
    service = _service(settings, subscription_repo, source, _FakeInfoApi())

    status = await service.status("alice", wallet.upper().replace("0X", "0x"))

    assert source.calls == [(wallet, _NOW_MS - 86_400_000)]
    assert status.address == wallet
    assert status.display_name == "whale"
    assert status.activity_count == 2
    assert status.last_activity_time == _NOW_MS - 1_000
    assert status.open_positions is not None
    assert [(p.coin, p.size, p.unrealized_pnl) for p in status.open_positions] == [
        ("ETH", Decimal("-0.5"), Decimal("12.5"))
    ]
    assert status.open_order_count == 2
    assert status.account_value == Decimal("13109.48")
    assert status.delegated == Decimal("250.5")


async def test_no_recent_activity_has_no_last_time(
    settings: Any,
    wallet: str,
    subscription_repo: InMemorySubscriptionRepository,
) -> None:
    await _tracking(subscription_repo, wallet)
    service = _service(settings, subscription_repo, _FakeEventSource([]), _FakeInfoApi())

    status = await service.status("alice", wallet)

    assert status.activity_count == 0
    assert status.last_activity_time is None
    assert status.display_name == f"{wallet[:6]}...{wallet[-4:]}"


async def test_failed_account_queries_leave_fields_unknown(
    settings: Any,
    wallet: str,
    subscription_repo: InMemorySubscriptionRepository,
) -> None:
    await _tracking(subscription_repo, wallet)
    info = _FakeInfoApi()
    info.failing = {"state", "orders"}
    info.summary = None
    service = _service(settings, subscription_repo, _FakeEventSource([]), info)

    status = await service.status("alice", wallet)

    assert status.open_positions is None
    assert status.account_value is None
    assert status.open_order_count is None
    assert status.delegated is None


async def test_untracked_wallet_is_rejected(
    settings: Any,
    wallet: str,
    other_wallet: str,
    subscription_repo: InMemorySubscriptionRepository,
) -> None:
    await _tracking(subscription_repo, wallet)
    source = _FakeEventSource([])
    service = _service(settings, subscription_repo, source, _FakeInfoApi())

    with pytest.raises(WalletNotTrackedError):
        await service.status("alice", other_wallet)
    with pytest.raises(WalletNotTrackedError):
        await service.status("bob", wallet)
    assert source.calls == []


async def test_invalid_address_is_rejected(
    settings: Any,
    subscription_repo: InMemorySubscriptionRepository,
) -> None:
    service = _service(settings, subscription_repo, _FakeEventSource([]), _FakeInfoApi())

    with pytest.raises(InvalidWalletAddressError):
        await service.status("alice", "0x123")
