"""Notification fan-out."""

from hyperliquid_wallet_tracker.services.dispatch.notification_dispatcher import (
    DispatchResult,
    NotificationDispatcher,
)

__all__ = ["DispatchResult", "NotificationDispatcher"]
