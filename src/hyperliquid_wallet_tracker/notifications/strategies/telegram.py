# -*- coding: utf-8 -*-
"""Telegram notification strategy (async)."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog
from telegram import Bot
from telegram.error import (
    BadRequest,
    Forbidden,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)
from telegram.request import HTTPXRequest

from hyperliquid_wallet_tracker.exceptions import NotificationDeliveryError
from hyperliquid_wallet_tracker.notifications.strategies.base import BaseNotificationStrategy
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.config.config import Settings
    from hyperliquid_wallet_tracker.notifications.types import NotificationStyler


class TelegramNotifier(BaseNotificationStrategy):
    """Send notifications to Telegram chats using python-telegram-bot.

    Each message goes to ``message.recipient_id``; messages without a
    recipient go to ``telegram.owner_chat_id`` (or are skipped if unset).
    A chat that rejects the message (or any other non-transport Telegram
    error) raises NotificationDeliveryError at once, with no retry, so the
    dispatcher can count the failure and move on. The only retries are
    transport-level ones here: network errors and Telegram flood control,
    bounded by telegram.max_retries. ``messages_per_minute`` is enforced
    across concurrent sends: each send reserves its slot under a lock
    before it goes out.
    """

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        bot: Optional[Bot] = None,
        sleep: Callable[[float], Any] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._styler: "NotificationStyler" = styler

        cfg = self.settings.telegram
        if not cfg.enabled or not cfg.api_key:
            raise ValueError("TelegramNotifier requires telegram.enabled and an api_key.")

        self.token: str = str(cfg.api_key)
        self.owner_chat_id: Optional[str] = str(cfg.owner_chat_id) if cfg.owner_chat_id else None
        self.messages_per_minute = cfg.messages_per_minute
        self.max_retries = cfg.max_retries
        self.backoff_base_seconds = cfg.backoff_base_seconds

        self.connect_timeout = cfg.connect_timeout
        self.read_timeout = cfg.read_timeout
        self.write_timeout = cfg.write_timeout
        self.pool_timeout = cfg.pool_timeout

        self._bot: Optional[Bot] = bot
        self._sleep = sleep
        self._running = False
        self._message_timestamps: list[float] = []
        self._rate_limit_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return
        if self._bot is None:
            request = HTTPXRequest(
                connect_timeout=self.connect_timeout,
                read_timeout=self.read_timeout,
                write_timeout=self.write_timeout,
                pool_timeout=self.pool_timeout,
            )
            self._bot = Bot(token=self.token, request=request)
        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return
        self._bot = None
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running:
            self._logger.warning("telegram_not_running_cannot_send")
            return
        chat_id = message.recipient_id or self.owner_chat_id
        if chat_id is None:
            self._logger.debug(
                "telegram_no_recipient_skipped",
                notification_event_type=message.event_type,
            )
            return
        await self._send_message(chat_id, self._styler.render(message))

    def _backoff(self, attempt: int) -> float:
        return min(60.0, self.backoff_base_seconds * (2 ** (attempt - 1)))

    async def _send_message(self, chat_id: str, text: str) -> None:
        if self._bot is None:
            raise NotificationDeliveryError("telegram bot not initialized", recipient_id=chat_id)

        await self._apply_rate_limit()
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                await self._bot.send_message(
                    chat_id=chat_id,
                    text=text,
                    parse_mode="HTML",
                    disable_web_page_preview=True,
                )
                return
            except RetryAfter as exc:
                last_error = exc
                retry_after = exc.retry_after
                retry_seconds = (
                    retry_after.total_seconds()
                    if hasattr(retry_after, "total_seconds")
                    else float(retry_after)
                )
                self._logger.warning(
                    "telegram_rate_limit_retry_after",
                    telegram_chat_id=chat_id,
                    retry_seconds=retry_seconds,
                )
                await self._sleep(retry_seconds)
            except (BadRequest, Forbidden) as exc:
                self._logger.error(
                    "telegram_message_rejected",
                    telegram_chat_id=chat_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise NotificationDeliveryError(
                    f"telegram rejected message: {exc}", recipient_id=chat_id, cause=exc
                ) from exc
            except (NetworkError, TimedOut) as exc:
                last_error = exc
                self._logger.warning(
                    "telegram_network_error_retry",
                    telegram_chat_id=chat_id,
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    backoff_seconds=self._backoff(attempt),
                )
                await self._sleep(self._backoff(attempt))
            except TelegramError as exc:
                self._logger.error(
                    "telegram_send_failed",
                    telegram_chat_id=chat_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise NotificationDeliveryError(
                    f"telegram send failed: {exc}", recipient_id=chat_id, cause=exc
                ) from exc

        self._logger.error(
            "telegram_max_retries_exceeded_message_dropped",
            telegram_chat_id=chat_id,
        )
        raise NotificationDeliveryError(
            f"telegram delivery failed after {self.max_retries} attempts",
            recipient_id=chat_id,
            cause=last_error,
        )

    async def _apply_rate_limit(self) -> None:
        """Wait for a free slot in the one-minute window, then reserve it."""
        if self.messages_per_minute <= 0:
            return

        async with self._rate_limit_lock:
            now = time.time()
            window_start = now - 60
            self._message_timestamps = [t for t in self._message_timestamps if t >= window_start]
            if len(self._message_timestamps) >= self.messages_per_minute:
                sleep_time = 60 - (now - self._message_timestamps[0])
                if sleep_time > 0:
                    await self._sleep(sleep_time)
            self._message_timestamps.append(time.time())
