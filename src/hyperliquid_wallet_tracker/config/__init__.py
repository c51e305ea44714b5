"""Configuration subpackage."""

from hyperliquid_wallet_tracker.config.config import (
    ApiSettings,
    AppSettings,
    ConsoleNotificationSettings,
    LoggingSettings,
    MarketsSettings,
    MonitoringSettings,
    Settings,
    StorageSettings,
    TelegramNotificationSettings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "ConsoleNotificationSettings",
    "LoggingSettings",
    "MarketsSettings",
    "MonitoringSettings",
    "Settings",
    "StorageSettings",
    "TelegramNotificationSettings",
    "get_settings",
]
