"""Market events (emitted by MarketListingDetector)."""

from __future__ import annotations

from bubus import BaseEvent  # type: ignore[import-untyped]

from hyperliquid_wallet_tracker.models.market import MarketListing, MarketListingDiff


class NewMarketsListedEvent(BaseEvent[None]):
    """Emitted when instruments appear that were absent from the previous snapshot.

    Handled by NewListingNotifier to broadcast the announcement.
    """

    new_perps: list[MarketListing] = []
    new_spots: list[MarketListing] = []

    @classmethod
    def from_diff(cls, diff: MarketListingDiff) -> NewMarketsListedEvent:
        return cls(new_perps=list(diff.new_perps), new_spots=list(diff.new_spots))

    def to_diff(self) -> MarketListingDiff:
        return MarketListingDiff(new_perps=list(self.new_perps), new_spots=list(self.new_spots))
