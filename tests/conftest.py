# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import pytest

from hyperliquid_wallet_tracker.models.activity import (
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
    StakingKind,
)
from hyperliquid_wallet_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemorySubscriptionRepository,
)


@pytest.fixture
def wallet() -> str:
    """Default tracked wallet used by tests."""
    return "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"


@pytest.fixture
def other_wallet() -> str:
    return "0x9a8b7c6d5e4f3a2b1c0d9e8f7a6b5c4d3e2f1a0b"


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def D() -> Callable[[Any], Decimal]:
    """Decimal helper: D('1.23') -> Decimal('1.23')."""
    return lambda value: Decimal(str(value))


def _monitoring(**overrides: Any) -> SimpleNamespace:
    values: dict[str, Any] = {
        "poll_seconds": 10.0,
        "initial_lookback_seconds": 60.0,
        "max_concurrent_wallets": 8,
        "max_wallets_per_subscriber": 5,
        "large_stake_threshold": 10000.0,
        "broadcast_batch_size": 25,
        "broadcast_batch_delay_seconds": 1.0,
        "staking_wei_decimals": 18,
        "finished_sliced_orders_cache_size": 128,
        "sliced_order_idle_seconds": 86400.0,
        "status_activity_window_seconds": 86400.0,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def settings_factory() -> Callable[..., Any]:
    """Build minimal settings object; keyword overrides apply to settings.monitoring."""

    def _build(**monitoring_overrides: Any) -> Any:
        return SimpleNamespace(
            api=SimpleNamespace(
                base_url="https://api.hyperliquid.xyz",
                timeout_seconds=5.0,
                max_retries=3,
            ),
            monitoring=_monitoring(**monitoring_overrides),
            markets=SimpleNamespace(enabled=True, poll_seconds=300.0),
            console=SimpleNamespace(enabled=True),
            telegram=SimpleNamespace(
                enabled=True,
                api_key="123:abc",
                owner_chat_id="999",
                messages_per_minute=0,
                max_retries=3,
                backoff_base_seconds=0.1,
                connect_timeout=1.0,
                read_timeout=1.0,
                write_timeout=1.0,
                pool_timeout=1.0,
            ),
        )

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Any]) -> Any:
    return settings_factory()


@pytest.fixture
def fill_factory(D: Callable[[Any], Decimal]) -> Callable[..., Fill]:
    """Build Fill with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> Fill:
        return Fill(
            time=overrides.pop("time", 1_700_000_000_000),
            coin=overrides.pop("coin", "BTC"),
            side=overrides.pop("side", "B"),
            size=overrides.pop("size", D("0.5")),
            price=overrides.pop("price", D("65000")),
            order_id=overrides.pop("order_id", "111"),
            trade_id=overrides.pop("trade_id", "222"),
            closed_pnl=overrides.pop("closed_pnl", None),
            hash=overrides.pop("hash", None),
        )

    return _build


@pytest.fixture
def order_event_factory(D: Callable[[Any], Decimal]) -> Callable[..., OrderEvent]:
    def _build(**overrides: Any) -> OrderEvent:
        return OrderEvent(
            time=overrides.pop("time", 1_700_000_000_000),
            order_id=overrides.pop("order_id", "333"),
            status=overrides.pop("status", "open"),
            coin=overrides.pop("coin", "ETH"),
            side=overrides.pop("side", "A"),
            size=overrides.pop("size", D("2")),
            price=overrides.pop("price", D("3200")),
        )

    return _build


@pytest.fixture
def sliced_fill_factory(D: Callable[[Any], Decimal]) -> Callable[..., SlicedFill]:
    """Build SlicedFill (one TWAP slice); slice_id defaults to f"tid-{time}"."""

    def _build(**overrides: Any) -> SlicedFill:
        time = overrides.pop("time", 100)
        return SlicedFill(
            time=time,
            slice_order_id=overrides.pop("slice_order_id", "T1"),
            coin=overrides.pop("coin", "BTC"),
            side=overrides.pop("side", "B"),
            size=overrides.pop("size", D("10")),
            slice_id=overrides.pop("slice_id", f"tid-{time}"),
            price=overrides.pop("price", D("100")),
            closed_pnl=overrides.pop("closed_pnl", None),
            is_terminal_done=overrides.pop("is_terminal_done", False),
            is_terminal_cancelled=overrides.pop("is_terminal_cancelled", False),
            filled_size=overrides.pop("filled_size", None),
        )

    return _build


@pytest.fixture
def staking_factory(D: Callable[[Any], Decimal]) -> Callable[..., StakingEvent]:
    def _build(**overrides: Any) -> StakingEvent:
        return StakingEvent(
            time=overrides.pop("time", 1_700_000_000_000),
            kind=overrides.pop("kind", StakingKind.DELEGATE),
            amount=overrides.pop("amount", D("100")),
            hash=overrides.pop("hash", "0x" + "ab" * 32),
            validator=overrides.pop("validator", "0x" + "cd" * 20),
        )

    return _build


@pytest.fixture
def processed_repo() -> InMemoryProcessedEventRepository:
    """Fresh in-memory processed event repository per test."""
    return InMemoryProcessedEventRepository()


@pytest.fixture
def subscription_repo() -> InMemorySubscriptionRepository:
    """Fresh in-memory subscription repository per test."""
    return InMemorySubscriptionRepository()

