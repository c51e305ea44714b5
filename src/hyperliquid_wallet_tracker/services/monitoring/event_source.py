# -*- coding: utf-8 -*-
"""Event source: fetch and classify a wallet's activity since a checkpoint."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Sequence

import structlog

from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient
from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.exceptions import HyperliquidAPIError
from hyperliquid_wallet_tracker.models.activity import (
    Activity,
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
)
from hyperliquid_wallet_tracker.utils.validation import mask_address


class EventSourceAdapter:
    """Fetches fills, order history, sliced fills and staking history for one wallet.

    The four queries run concurrently. A query that fails after the HTTP
    client's retries contributes an empty stream instead of raising; records
    that cannot be classified are skipped.
    """

    def __init__(
        self,
        info_api: InfoApiClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            info_api: Info API client (injected).
            settings: Application settings (uses settings.monitoring.staking_wei_decimals).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._info = info_api
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def fetch_activity(self, wallet: str, since_ms: int) -> list[Activity]:
        """Return the wallet's activity strictly newer than ``since_ms``, oldest first.

        Args:
            wallet: 0x wallet address.
            since_ms: Checkpoint in epoch milliseconds.
        """
        fills, orders, slices, staking = await asyncio.gather(
            self._safe_query("userFills", wallet, self._info.user_fills(wallet)),
            self._safe_query("historicalOrders", wallet, self._info.order_history(wallet)),
            self._safe_query("userTwapSliceFills", wallet, self._info.twap_slice_fills(wallet)),
            self._safe_query(
                "delegatorHistory",
                wallet,
                self._info.delegator_history(wallet, start_time=since_ms),
            ),
        )

        wei_decimals = self._settings.monitoring.staking_wei_decimals
        activities: list[Activity] = []
        activities.extend(self._classify(wallet, "fill", fills, Fill.from_response))
        activities.extend(self._classify(wallet, "order", orders, OrderEvent.from_response))
        activities.extend(self._classify(wallet, "sliced_fill", slices, SlicedFill.from_response))
        activities.extend(
            self._classify(
                wallet,
                "staking",
                staking,
                lambda r: StakingEvent.from_response(r, wei_decimals=wei_decimals),
            )
        )

        fresh = [a for a in activities if a.time > since_ms]
        fresh.sort(key=lambda a: a.time)
        if fresh:
            self._logger.debug(
                "event_source_activity_fetched",
                wallet=wallet,
                activity_count=len(fresh),
                since_ms=since_ms,
            )
        return fresh

    async def _safe_query(
        self,
        query: str,
        wallet: str,
        call: Awaitable[Sequence[Any]],
    ) -> Sequence[Any]:
        try:
            return await call
        except HyperliquidAPIError as e:
            self._logger.warning(
                "event_source_query_failed",
                info_query=query,
                wallet=mask_address(wallet),
                error_type=type(e).__name__,
                error_message=str(e),
                http_status_code=e.status_code,
            )
            return []

    def _classify[T](
        self,
        wallet: str,
        kind: str,
        records: Sequence[Any],
        parse: Callable[[dict[str, Any]], T],
    ) -> list[T]:
        parsed: list[T] = []
        for record in records:
            try:
                parsed.append(parse(record))
            except ValueError as e:
                self._logger.debug(
                    "activity_parse_skipped",
                    activity_kind=kind,
                    wallet=mask_address(wallet),
                    error_message=str(e),
                )
        return parsed
