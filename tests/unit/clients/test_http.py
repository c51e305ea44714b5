# -*- coding: utf-8 -*-
"""Unit tests for AsyncHttpClient."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import aiohttp
import pytest

from hyperliquid_wallet_tracker.clients.http import AsyncHttpClient
from hyperliquid_wallet_tracker.exceptions import HyperliquidAPIError, RateLimitError

_URL = "https://api.hyperliquid.xyz/info"


class _FakeResponse:
    def __init__(self, status: int, body: Any = None, headers: dict[str, str] | None = None) -> None:
        self.status = status
        self._body = body
        self.headers = headers or {}

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=SimpleNamespace(real_url=_URL),  # type: ignore[arg-type]
                history=(),
                status=self.status,
                message="error",
            )

    async def json(self, content_type: str | None = None) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, responses: list[_FakeResponse | Exception]) -> None:
        self._responses = list(responses)
        self.requests: list[tuple[str, Any]] = []
        self.closed = False

    def post(self, url: str, *, json: Any = None) -> _FakeResponse:
        self.requests.append((url, json))
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    async def close(self) -> None:
        self.closed = True


class _RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _client(settings: Any, session: _FakeSession, sleep: _RecordingSleep) -> AsyncHttpClient:
    return AsyncHttpClient(settings, session=session, sleep=sleep)  # type: ignore[arg-type]


async def test_post_json_returns_parsed_body(settings: Any) -> None:
    session = _FakeSession([_FakeResponse(200, [{"coin": "BTC"}])])
    client = _client(settings, session, _RecordingSleep())

    result = await client.post_json(_URL, json={"type": "userFills", "user": "0xabc"})

    assert result == [{"coin": "BTC"}]
    assert session.requests == [(_URL, {"type": "userFills", "user": "0xabc"})]


async def test_rate_limit_honours_retry_after_then_succeeds(settings: Any) -> None:
    session = _FakeSession(
        [_FakeResponse(429, headers={"Retry-After": "2"}), _FakeResponse(200, {"ok": True})]
    )
    sleep = _RecordingSleep()
    client = _client(settings, session, sleep)

    result = await client.post_json(_URL, json={"type": "meta"})

    assert result == {"ok": True}
    assert sleep.calls == [2.0]


async def test_rate_limited_on_every_attempt_raises_rate_limit_error(settings: Any) -> None:
    session = _FakeSession([_FakeResponse(429) for _ in range(3)])
    client = _client(settings, session, _RecordingSleep())

    with pytest.raises(RateLimitError):
        await client.post_json(_URL, json={"type": "meta"})
    assert len(session.requests) == 3


async def test_server_errors_exhaust_retries(settings: Any) -> None:
    session = _FakeSession([_FakeResponse(500), aiohttp.ClientConnectionError("reset"), _FakeResponse(502)])
    sleep = _RecordingSleep()
    client = _client(settings, session, sleep)

    with pytest.raises(HyperliquidAPIError) as exc_info:
        await client.post_json(_URL, json={"type": "meta"})

    assert exc_info.value.status_code == 502
    assert exc_info.value.url == _URL
    assert len(sleep.calls) == 2


async def test_injected_session_is_not_closed(settings: Any) -> None:
    session = _FakeSession([])
    client = _client(settings, session, _RecordingSleep())

    await client.aclose()

    assert session.closed is False


async def test_non_json_body_is_retried_then_wrapped(settings: Any) -> None:
    html_error = json.JSONDecodeError("Expecting value", "<html>bad gateway</html>", 0)
    session = _FakeSession([_FakeResponse(200, html_error) for _ in range(3)])
    sleep = _RecordingSleep()
    client = _client(settings, session, sleep)

    with pytest.raises(HyperliquidAPIError) as exc_info:
        await client.post_json(_URL, json={"type": "userFills"})

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert len(session.requests) == 3
    assert len(sleep.calls) == 2


async def test_non_json_body_then_valid_body_succeeds(settings: Any) -> None:
    html_error = json.JSONDecodeError("Expecting value", "<html>bad gateway</html>", 0)
    session = _FakeSession([_FakeResponse(200, html_error), _FakeResponse(200, [])])
    client = _client(settings, session, _RecordingSleep())

    assert await client.post_json(_URL, json={"type": "userFills"}) == []
