# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.notifications.strategies.base import BaseNotificationStrategy
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from hyperliquid_wallet_tracker.notifications.types import NotificationStyler

_TAG_RE = re.compile(r"</?(b|i|code)>")


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout, prefixed with the recipient."""

    def __init__(self, settings: "Settings", styler: "NotificationStyler") -> None:
        super().__init__(settings)
        self._running = False
        self._styler = styler

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        """Send a notification to the console."""
        if not self.is_running or not self.settings.console.enabled:
            return
        body = _TAG_RE.sub("", self._styler.render(message))
        if message.recipient_id is not None:
            body = f"[to {message.recipient_id}]\n{body}"
        print(body)
