"""Hyperliquid wallet tracker: polls wallet activity and notifies subscribers."""

from hyperliquid_wallet_tracker.clients import AsyncHttpClient, InfoApiClient
from hyperliquid_wallet_tracker.config import get_settings
from hyperliquid_wallet_tracker.DI import Container
from hyperliquid_wallet_tracker.services import PollScheduler, SubscriptionService

__version__ = "0.1.0"
__all__ = [
    "AsyncHttpClient",
    "InfoApiClient",
    "Container",
    "PollScheduler",
    "SubscriptionService",
    "get_settings",
]
