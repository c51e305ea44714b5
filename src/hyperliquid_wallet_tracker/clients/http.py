# -*- coding: utf-8 -*-
"""Async HTTP client with bounded retries, timeouts and rate-limit handling."""

from __future__ import annotations

import asyncio
import random
import uuid
from typing import Any, Callable, Dict, Optional

import aiohttp
import structlog
from structlog.contextvars import bound_contextvars

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.exceptions import HyperliquidAPIError, RateLimitError


class AsyncHttpClient:
    """Async JSON-over-HTTP client for the Hyperliquid API.

    Every request carries the configured total timeout and is attempted at most
    ``settings.api.max_retries`` times. HTTP 429 honours ``Retry-After``. If no
    session is injected the client owns one and must be closed via aclose()
    or used as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Callable[[float], Any] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (timeout, max_retries).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            sleep: Awaitable sleep used between attempts (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @staticmethod
    def _backoff_delay(attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    @staticmethod
    def _retry_after(response: aiohttp.ClientResponse) -> Optional[float]:
        header = response.headers.get("Retry-After")
        if not header:
            return None
        try:
            return float(header)
        except ValueError:
            return None

    async def post_json(
        self,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """POST a JSON body and return the parsed JSON response.

        Args:
            url: Full URL to request.
            json: JSON-serializable body.

        Returns:
            Parsed JSON (dict, list, or None for an empty body).

        Raises:
            RateLimitError: If every attempt was rate limited (429).
            HyperliquidAPIError: If the request fails after all attempts.
        """
        payload = json or {}
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.api.max_retries
        last_error: Optional[Exception] = None
        last_retry_after: Optional[float] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_query_type=payload.get("type"),
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                is_last = attempt == max_retries - 1
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.post(url, json=payload) as response:
                            if response.status == 429:
                                last_retry_after = self._retry_after(response)
                                last_error = RateLimitError(url=url, retry_after=last_retry_after)
                                self._logger.warning(
                                    "http_post_rate_limited",
                                    http_status_code=429,
                                    http_retry_after_seconds=last_retry_after,
                                )
                                if not is_last:
                                    delay = last_retry_after or self._backoff_delay(attempt)
                                    await self._sleep(delay)
                                continue

                            response.raise_for_status()
                            return await response.json(content_type=None)
                    except aiohttp.ClientResponseError as e:
                        last_error = e
                        self._logger.debug(
                            "http_post_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                            http_status_code=e.status,
                        )
                    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                        # ValueError: body was not JSON (e.g. an HTML gateway page)
                        last_error = e
                        self._logger.debug(
                            "http_post_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                    if not is_last:
                        await self._sleep(self._backoff_delay(attempt))

            self._logger.warning(
                "http_post_failed",
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            if isinstance(last_error, RateLimitError):
                raise last_error
            status_code = (
                last_error.status if isinstance(last_error, aiohttp.ClientResponseError) else None
            )
            raise HyperliquidAPIError(
                f"POST failed after {max_retries} attempts: {url}",
                url=url,
                status_code=status_code,
                cause=last_error,
            ) from last_error
