# -*- coding: utf-8 -*-
"""Unit tests for InfoApiClient."""

from __future__ import annotations

from typing import Any

from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient


class _FakeHttp:
    def __init__(self, responses: dict[str, Any]) -> None:
        self._responses = responses
        self.bodies: list[dict[str, Any]] = []

    async def post_json(self, url: str, *, json: dict[str, Any] | None = None) -> Any:
        body = json or {}
        self.bodies.append(body)
        return self._responses.get(body["type"])


def _client(settings: Any, responses: dict[str, Any]) -> tuple[InfoApiClient, _FakeHttp]:
    http = _FakeHttp(responses)
    return InfoApiClient(http, settings), http  # type: ignore[arg-type]


async def test_user_fills_sends_type_and_user(settings: Any, wallet: str) -> None:
    client, http = _client(settings, {"userFills": [{"coin": "BTC"}, "junk"]})

    fills = await client.user_fills(wallet)

    assert fills == [{"coin": "BTC"}]
    assert http.bodies == [{"type": "userFills", "user": wallet}]


async def test_delegator_history_passes_time_bounds(settings: Any, wallet: str) -> None:
    client, http = _client(settings, {"delegatorHistory": []})

    await client.delegator_history(wallet, start_time=100)

    assert http.bodies == [{"type": "delegatorHistory", "user": wallet, "startTime": 100}]


async def test_unexpected_shapes_degrade_to_empty(settings: Any, wallet: str) -> None:
    client, _ = _client(settings, {"userFills": {"error": "x"}, "meta": [1, 2]})

    assert await client.user_fills(wallet) == []
    assert await client.order_history(wallet) == []
    assert await client.meta() is None


async def test_account_queries_send_user(settings: Any, wallet: str) -> None:
    client, http = _client(
        settings,
        {
            "openOrders": [{"coin": "BTC", "oid": 1}],
            "clearinghouseState": {"assetPositions": []},
            "delegatorSummary": {"delegated": "12.5"},
        },
    )

    assert await client.open_orders(wallet) == [{"coin": "BTC", "oid": 1}]
    assert await client.clearinghouse_state(wallet) == {"assetPositions": []}
    assert await client.delegator_summary(wallet) == {"delegated": "12.5"}
    assert [b["type"] for b in http.bodies] == ["openOrders", "clearinghouseState", "delegatorSummary"]
    assert all(b["user"] == wallet for b in http.bodies)
