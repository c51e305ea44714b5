"""HTTP and API clients."""

from hyperliquid_wallet_tracker.clients.http import AsyncHttpClient
from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient

__all__ = [
    "AsyncHttpClient",
    "InfoApiClient",
]
