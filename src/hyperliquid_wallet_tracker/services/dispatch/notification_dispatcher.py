# -*- coding: utf-8 -*-
"""Notification dispatcher: per-wallet fan-out and the system-wide broadcast rule."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.models.activity import StakingEvent
from hyperliquid_wallet_tracker.notifications.messages import large_stake_message
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage
from hyperliquid_wallet_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.notifications.notification_manager import NotificationService
    from hyperliquid_wallet_tracker.persistence.repositories.interfaces import (
        ISubscriptionRepository,
    )


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Per-recipient outcome counts of one dispatch or broadcast."""

    sent: int = 0
    failed: int = 0

    @property
    def recipients(self) -> int:
        return self.sent + self.failed

    def __add__(self, other: DispatchResult) -> DispatchResult:
        return DispatchResult(sent=self.sent + other.sent, failed=self.failed + other.failed)


class NotificationDispatcher:
    """Sends one message per recipient through NotificationService.

    Recipients of one message are sent concurrently as independent tasks and
    joined before returning. A failed recipient is logged and counted; it is
    not retried here and never affects the other recipients.
    """

    def __init__(
        self,
        subscription_repository: "ISubscriptionRepository",
        notification_service: "NotificationService",
        settings: Settings,
        *,
        sleep: Callable[[float], Any] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            subscription_repository: Resolves subscribers of a wallet and the broadcast audience.
            notification_service: Delivers a rendered message to one recipient.
            settings: Application settings (uses settings.monitoring broadcast options).
            sleep: Awaitable sleep used between broadcast batches (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._subscriptions = subscription_repository
        self._notifications = notification_service
        self._settings = settings
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def dispatch(self, wallet: str, message: NotificationMessage) -> DispatchResult:
        """Send ``message`` to every active subscriber of ``wallet``.

        Each copy carries the subscriber's nickname for the wallet in its payload.
        """
        subscribers = await self._subscriptions.subscribers_of(wallet)
        if not subscribers:
            self._logger.debug(
                "dispatch_no_subscribers",
                wallet=mask_address(wallet),
                notification_event_type=message.event_type,
            )
            return DispatchResult()

        result = await self._send_all(
            [self._for_recipient(message, s.subscriber_id, s.nickname) for s in subscribers]
        )
        self._logger.info(
            "dispatch_completed",
            wallet=mask_address(wallet),
            notification_event_type=message.event_type,
            dispatch_sent=result.sent,
            dispatch_failed=result.failed,
        )
        return result

    async def broadcast(self, message: NotificationMessage) -> DispatchResult:
        """Send ``message`` once to every active subscriber, in rate-limited batches."""
        subscribers = await self._subscriptions.list_active_subscribers()
        mon = self._settings.monitoring
        batch_size = mon.broadcast_batch_size
        total = DispatchResult()
        for start in range(0, len(subscribers), batch_size):
            if start > 0:
                await self._sleep(mon.broadcast_batch_delay_seconds)
            batch = subscribers[start : start + batch_size]
            total += await self._send_all(
                [self._for_recipient(message, s.subscriber_id) for s in batch]
            )
        self._logger.info(
            "broadcast_completed",
            notification_event_type=message.event_type,
            broadcast_audience=len(subscribers),
            dispatch_sent=total.sent,
            dispatch_failed=total.failed,
        )
        return total

    def is_large_stake(self, event: StakingEvent) -> bool:
        threshold = Decimal(str(self._settings.monitoring.large_stake_threshold))
        return event.amount > threshold

    async def maybe_broadcast_large_stake(
        self,
        wallet: str,
        event: StakingEvent,
    ) -> DispatchResult | None:
        """Broadcast a staking movement above the threshold to the whole audience.

        Independent of how many subscribers follow ``wallet`` directly.
        Returns None when the amount does not exceed the threshold.
        """
        if not self.is_large_stake(event):
            return None
        self._logger.info(
            "large_stake_detected",
            wallet=mask_address(wallet),
            staking_kind=event.kind.value,
            staking_amount=str(event.amount),
        )
        return await self.broadcast(large_stake_message(wallet, event))

    @staticmethod
    def _for_recipient(
        message: NotificationMessage,
        recipient_id: str,
        nickname: str | None = None,
    ) -> NotificationMessage:
        payload = dict(message.payload or {})
        if nickname:
            payload["nickname"] = nickname
        return replace(message, recipient_id=recipient_id, payload=payload)

    async def _send_all(self, messages: list[NotificationMessage]) -> DispatchResult:
        outcomes = await asyncio.gather(*(self._send_one(m) for m in messages))
        sent = sum(1 for ok in outcomes if ok)
        return DispatchResult(sent=sent, failed=len(outcomes) - sent)

    async def _send_one(self, message: NotificationMessage) -> bool:
        try:
            await self._notifications.deliver(message)
            return True
        except Exception as e:
            self._logger.warning(
                "dispatch_recipient_failed",
                recipient_id=message.recipient_id,
                notification_event_type=message.event_type,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
