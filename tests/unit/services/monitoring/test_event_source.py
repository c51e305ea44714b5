# -*- coding: utf-8 -*-
"""Unit tests for EventSourceAdapter."""

from __future__ import annotations

import json
from typing import Any

from hyperliquid_wallet_tracker.clients.http import AsyncHttpClient
from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient
from hyperliquid_wallet_tracker.exceptions import HyperliquidAPIError
from hyperliquid_wallet_tracker.models.activity import (
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
)
from hyperliquid_wallet_tracker.services.monitoring.event_source import EventSourceAdapter


class _FakeInfoApi:
    def __init__(self) -> None:
        self.fills: list[dict[str, Any]] = []
        self.orders: list[dict[str, Any]] = []
        self.slices: list[dict[str, Any]] = []
        self.staking: list[dict[str, Any]] = []
        self.failing: set[str] = set()
        self.staking_start_time: int | None = None

    def _maybe_fail(self, name: str) -> None:
        if name in self.failing:
            raise HyperliquidAPIError(f"{name} failed", status_code=500)

    async def user_fills(self, user: str) -> list[dict[str, Any]]:
        self._maybe_fail("fills")
        return self.fills

    async def order_history(self, user: str) -> list[dict[str, Any]]:
        self._maybe_fail("orders")
        return self.orders

    async def twap_slice_fills(self, user: str) -> list[dict[str, Any]]:
        self._maybe_fail("slices")
        return self.slices

    async def delegator_history(
        self, user: str, *, start_time: int | None = None, end_time: int | None = None
    ) -> list[dict[str, Any]]:
        self._maybe_fail("staking")
        self.staking_start_time = start_time
        return self.staking


def _fill(time: int, tid: int) -> dict[str, Any]:
    return {"time": time, "coin": "BTC", "side": "B", "sz": "1", "px": "100", "oid": 1, "tid": tid}


async def test_fetch_activity_classifies_filters_and_sorts(settings: Any, wallet: str) -> None:
    info = _FakeInfoApi()
    info.fills = [_fill(300, 1), _fill(50, 2)]
    info.orders = [
        {"order": {"coin": "ETH", "side": "A", "sz": "1", "oid": 5}, "status": "open", "statusTimestamp": 200}
    ]
    info.slices = [
        {"fill": {"time": 250, "coin": "BTC", "side": "B", "sz": "1", "tid": 9}, "twapId": 3}
    ]
    info.staking = [
        {"time": 150, "hash": "0xh", "delta": {"cDeposit": {"wei": "1000000000000000000"}}}
    ]
    source = EventSourceAdapter(info, settings)  # type: ignore[arg-type]

    activities = await source.fetch_activity(wallet, 100)

    assert [a.time for a in activities] == [150, 200, 250, 300]
    assert [type(a) for a in activities] == [StakingEvent, OrderEvent, SlicedFill, Fill]
    assert info.staking_start_time == 100


async def test_failed_query_contributes_empty_stream(settings: Any, wallet: str) -> None:
    info = _FakeInfoApi()
    info.fills = [_fill(300, 1)]
    info.failing = {"orders", "staking"}
    source = EventSourceAdapter(info, settings)  # type: ignore[arg-type]

    activities = await source.fetch_activity(wallet, 0)

    assert len(activities) == 1
    assert isinstance(activities[0], Fill)


async def test_unparsable_records_are_skipped(settings: Any, wallet: str) -> None:
    info = _FakeInfoApi()
    info.fills = [_fill(300, 1), {"coin": "BTC"}, {"time": 400, "side": "?", "sz": "1", "px": "1"}]
    source = EventSourceAdapter(info, settings)  # type: ignore[arg-type]

    activities = await source.fetch_activity(wallet, 0)

    assert [a.time for a in activities] == [300]


async def test_records_at_checkpoint_are_excluded(settings: Any, wallet: str) -> None:
    info = _FakeInfoApi()
    info.fills = [_fill(100, 1), _fill(101, 2)]
    source = EventSourceAdapter(info, settings)  # type: ignore[arg-type]

    activities = await source.fetch_activity(wallet, 100)

    assert [a.time for a in activities] == [101]


class _RoutedResponse:
    def __init__(self, body: Any) -> None:
        self.status = 200
        self.headers: dict[str, str] = {}
        self._body = body

    def raise_for_status(self) -> None:
        return None

    async def json(self, content_type: str | None = None) -> Any:
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    async def __aenter__(self) -> _RoutedResponse:
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None


class _RoutedSession:
    """Answers /info POSTs by query type; str bodies go through json.loads."""

    def __init__(self, bodies: dict[str, Any]) -> None:
        self._bodies = bodies
        self.closed = False

    def post(self, url: str, *, json: Any = None) -> _RoutedResponse:
        return _RoutedResponse(self._bodies.get(json["type"], []))


async def _no_sleep(seconds: float) -> None:
    return None


async def test_html_body_for_one_query_keeps_other_streams(settings: Any, wallet: str) -> None:
    session = _RoutedSession(
        {
            "userFills": "<html>bad gateway</html>",
            "delegatorHistory": [
                {"time": 150, "hash": "0xh", "delta": {"cDeposit": {"wei": "1000000000000000000"}}}
            ],
        }
    )
    http = AsyncHttpClient(settings, session=session, sleep=_no_sleep)  # type: ignore[arg-type]
    source = EventSourceAdapter(InfoApiClient(http, settings), settings)

    activities = await source.fetch_activity(wallet, 100)

    assert len(activities) == 1
    assert isinstance(activities[0], StakingEvent)
