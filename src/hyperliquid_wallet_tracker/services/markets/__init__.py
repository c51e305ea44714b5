"""Market-listing detection and announcement."""

from hyperliquid_wallet_tracker.services.markets.listing_detector import MarketListingDetector
from hyperliquid_wallet_tracker.services.markets.new_listing_notifier import NewListingNotifier

__all__ = ["MarketListingDetector", "NewListingNotifier"]
