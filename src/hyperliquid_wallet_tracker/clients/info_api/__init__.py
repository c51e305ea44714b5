"""Hyperliquid info API client and response schemas."""

from hyperliquid_wallet_tracker.clients.info_api.info_api import InfoApiClient, InfoQuery

__all__ = ["InfoApiClient", "InfoQuery"]
