"""Notification subsystem."""

from hyperliquid_wallet_tracker.notifications.notification_manager import (
    NotificationService,
)
from hyperliquid_wallet_tracker.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from hyperliquid_wallet_tracker.notifications.stylers import EventNotificationStyler
from hyperliquid_wallet_tracker.notifications.types import (
    NotificationMessage,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "EventNotificationStyler",
    "TelegramNotifier",
    "NotificationMessage",
    "NotificationService",
    "NotificationStyler",
]
