# -*- coding: utf-8 -*-
"""Wallet status report: recent activity plus current positions of a tracked wallet."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.exceptions import (
    HyperliquidAPIError,
    InvalidWalletAddressError,
    WalletNotTrackedError,
)
from hyperliquid_wallet_tracker.models.wallet_status import OpenPosition, WalletStatus
from hyperliquid_wallet_tracker.utils.validation import is_hex_address, mask_address, normalize_address

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient
    from hyperliquid_wallet_tracker.persistence.repositories.interfaces import ISubscriptionRepository
    from hyperliquid_wallet_tracker.services.monitoring.event_source import EventSourceAdapter


def _now_ms() -> int:
    return int(time.time() * 1000)


class WalletStatusService:
    """Builds a WalletStatus for a wallet the caller tracks.

    Activity comes from the same event source the scheduler polls, over
    ``monitoring.status_activity_window_seconds``. Account state, open orders
    and the staking summary are fetched concurrently; a part that fails is
    left as None in the report instead of failing the whole request.
    """

    def __init__(
        self,
        subscription_repository: "ISubscriptionRepository",
        event_source: "EventSourceAdapter",
        info_api: "InfoApiClient",
        settings: Settings,
        *,
        clock: Callable[[], int] = _now_ms,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._subscriptions = subscription_repository
        self._event_source = event_source
        self._info = info_api
        self._settings = settings
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def status(self, subscriber_id: str, address: str) -> WalletStatus:
        """Status report of ``address`` as seen by ``subscriber_id``.

        Raises:
            InvalidWalletAddressError: If ``address`` is not a 0x + 40 hex address.
            WalletNotTrackedError: If the subscriber does not track ``address``.
        """
        if not is_hex_address(address):
            raise InvalidWalletAddressError(address)
        address = normalize_address(address)
        wallets = await self._subscriptions.list_wallets(str(subscriber_id).strip())
        tracked = next((w for w in wallets if w.address == address), None)
        if tracked is None:
            raise WalletNotTrackedError(address)

        window_ms = int(self._settings.monitoring.status_activity_window_seconds * 1000)
        since_ms = self._clock() - window_ms
        activities, state, orders, staking = await asyncio.gather(
            self._event_source.fetch_activity(address, since_ms),
            self._optional("clearinghouseState", address, self._info.clearinghouse_state(address)),
            self._optional("openOrders", address, self._info.open_orders(address)),
            self._optional("delegatorSummary", address, self._info.delegator_summary(address)),
        )

        report = WalletStatus(
            address=address,
            display_name=tracked.display_name,
            window_ms=window_ms,
            activity_count=len(activities),
            last_activity_time=max((a.time for a in activities), default=None),
            open_positions=OpenPosition.from_clearinghouse_state(state) if state is not None else None,
            open_order_count=len(orders) if orders is not None else None,
            account_value=WalletStatus.account_value_from_state(state) if state is not None else None,
            delegated=WalletStatus.delegated_from_summary(staking) if staking is not None else None,
        )
        self._logger.info(
            "wallet_status_built",
            subscriber_id=subscriber_id,
            wallet=mask_address(address),
            activity_count=report.activity_count,
            open_positions_count=(
                len(report.open_positions) if report.open_positions is not None else None
            ),
        )
        return report

    async def _optional[T](self, query: str, address: str, call: Awaitable[T]) -> T | None:
        try:
            return await call
        except HyperliquidAPIError as e:
            self._logger.warning(
                "wallet_status_query_failed",
                info_query=query,
                wallet=mask_address(address),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None
