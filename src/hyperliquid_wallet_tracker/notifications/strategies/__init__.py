"""Delivery channels: Telegram chats per subscriber and the local console."""

from hyperliquid_wallet_tracker.notifications.strategies.base import BaseNotificationStrategy
from hyperliquid_wallet_tracker.notifications.strategies.console import ConsoleNotifier
from hyperliquid_wallet_tracker.notifications.strategies.telegram import TelegramNotifier

__all__ = ["BaseNotificationStrategy", "ConsoleNotifier", "TelegramNotifier"]
