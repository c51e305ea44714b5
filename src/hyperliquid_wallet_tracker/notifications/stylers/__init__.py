"""Notification stylers."""

from hyperliquid_wallet_tracker.notifications.stylers.notification_styler import (
    EventNotificationStyler,
)

__all__ = ["EventNotificationStyler"]
