# -*- coding: utf-8 -*-
"""NewListingNotifier: listens to NewMarketsListedEvent and broadcasts it to every subscriber."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from hyperliquid_wallet_tracker.events.markets import NewMarketsListedEvent
from hyperliquid_wallet_tracker.notifications.messages import new_markets_message

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from hyperliquid_wallet_tracker.services.dispatch import NotificationDispatcher


class NewListingNotifier:
    """Subscribes to NewMarketsListedEvent and broadcasts via NotificationDispatcher."""

    def __init__(
        self,
        dispatcher: "NotificationDispatcher",
        event_bus: Any,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._event_bus: "EventBus" = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to NewMarketsListedEvent."""
        self._event_bus.on(NewMarketsListedEvent, self._on_new_markets)
        self._logger.debug("new_listing_notifier_started")

    def stop(self) -> None:
        """Unsubscribe from NewMarketsListedEvent."""
        key = NewMarketsListedEvent.__name__
        handlers = getattr(self._event_bus, "handlers", {})
        if key in handlers:
            handlers[key] = [h for h in handlers[key] if h != self._on_new_markets]
        self._logger.debug("new_listing_notifier_stopped")

    async def _on_new_markets(self, event: NewMarketsListedEvent) -> None:
        """Handle NewMarketsListedEvent: build the announcement and broadcast it."""
        diff = event.to_diff()
        if diff.is_empty:
            return
        result = await self._dispatcher.broadcast(new_markets_message(diff))
        self._logger.info(
            "new_listing_broadcast",
            market_new_count=len(diff.new_perps) + len(diff.new_spots),
            dispatch_sent=result.sent,
            dispatch_failed=result.failed,
        )
