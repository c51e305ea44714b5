# -*- coding: utf-8 -*-
"""Subscription management: capacity-checked wallet tracking per subscriber."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Optional

import structlog

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.exceptions import (
    InvalidWalletAddressError,
    SubscriberNotFoundError,
    WalletLimitExceededError,
)
from hyperliquid_wallet_tracker.models.subscription import (
    Subscriber,
    TrackedWallet,
    TrackerStatistics,
)
from hyperliquid_wallet_tracker.utils.validation import (
    is_hex_address,
    mask_address,
    normalize_address,
)

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.persistence.repositories.interfaces import (
        IProcessedEventRepository,
        ISubscriptionRepository,
    )


class SubscriptionService:
    """Front-end facing operations on the subscription directory.

    Violations (bad address, too many wallets) are raised to the caller; they
    never reach the monitoring core.
    """

    def __init__(
        self,
        subscription_repository: "ISubscriptionRepository",
        processed_event_repository: "IProcessedEventRepository",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._subscriptions = subscription_repository
        self._processed = processed_event_repository
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def max_wallets_per_subscriber(self) -> int:
        return self._settings.monitoring.max_wallets_per_subscriber

    async def register_subscriber(
        self,
        subscriber_id: str,
        *,
        username: Optional[str] = None,
    ) -> Subscriber:
        """Register a subscriber if unknown and return the stored record."""
        await self._subscriptions.add_subscriber(Subscriber.create(subscriber_id, username=username))
        stored = await self._subscriptions.get_subscriber(str(subscriber_id).strip())
        if stored is None:
            raise SubscriberNotFoundError(f"subscriber {subscriber_id} could not be registered")
        return stored

    async def add_wallet(
        self,
        subscriber_id: str,
        address: str,
        *,
        nickname: Optional[str] = None,
        username: Optional[str] = None,
    ) -> TrackedWallet:
        """Start tracking ``address`` for a subscriber.

        Re-adding a wallet already tracked by the subscriber only updates the
        nickname and does not count against the limit.

        Raises:
            InvalidWalletAddressError: If ``address`` is not a 0x + 40 hex address.
            WalletLimitExceededError: If the subscriber already tracks the maximum.
        """
        if not is_hex_address(address):
            raise InvalidWalletAddressError(address)
        address = normalize_address(address)
        subscriber = await self.register_subscriber(subscriber_id, username=username)

        current = await self._subscriptions.list_wallets(subscriber.subscriber_id)
        already_tracked = any(w.address == address for w in current)
        limit = self.max_wallets_per_subscriber
        if not already_tracked and len(current) >= limit:
            self._logger.info(
                "subscription_wallet_limit_reached",
                subscriber_id=subscriber.subscriber_id,
                subscription_limit=limit,
            )
            raise WalletLimitExceededError(limit)

        wallet = await self._subscriptions.add_wallet(
            TrackedWallet(
                subscriber_id=subscriber.subscriber_id,
                address=address,
                nickname=(nickname or "").strip() or None,
                created_at=datetime.now(UTC),
            )
        )
        self._logger.info(
            "subscription_wallet_added",
            subscriber_id=subscriber.subscriber_id,
            wallet=mask_address(address),
            subscription_wallets_count=len(current) + (0 if already_tracked else 1),
        )
        return wallet

    async def remove_wallet(self, subscriber_id: str, address: str) -> bool:
        """Stop tracking ``address`` for a subscriber. Returns False if it was not tracked."""
        if not is_hex_address(address):
            raise InvalidWalletAddressError(address)
        removed = await self._subscriptions.deactivate_wallet(
            str(subscriber_id).strip(), normalize_address(address)
        )
        self._logger.info(
            "subscription_wallet_removed" if removed else "subscription_wallet_not_tracked",
            subscriber_id=subscriber_id,
            wallet=mask_address(address),
        )
        return removed

    async def list_wallets(self, subscriber_id: str) -> list[TrackedWallet]:
        return await self._subscriptions.list_wallets(str(subscriber_id).strip())

    async def statistics(self, *, now: Optional[datetime] = None) -> TrackerStatistics:
        """Usage numbers, including events processed in the last 24 hours."""
        now = now or datetime.now(UTC)
        events_today = await self._processed.count_since(now - timedelta(days=1))
        return await self._subscriptions.statistics(now=now, events_processed_today=events_today)
