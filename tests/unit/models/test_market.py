# -*- coding: utf-8 -*-
"""Unit tests for market listing parsing."""

from __future__ import annotations

from hyperliquid_wallet_tracker.models.market import MarketListing, MarketListingDiff


def test_from_universe_skips_unnamed_entries() -> None:
    listings = MarketListing.from_universe(
        {"universe": [{"name": "BTC", "szDecimals": 5}, {"szDecimals": 2}, "junk", {"name": "ETH"}]},
        "perp",
    )

    assert [m.name for m in listings] == ["BTC", "ETH"]
    assert listings[0].sz_decimals == 5
    assert listings[1].sz_decimals is None
    assert all(m.pool == "perp" for m in listings)


def test_from_universe_handles_missing_meta() -> None:
    assert MarketListing.from_universe(None, "spot") == []
    assert MarketListing.from_universe({"universe": "bad"}, "spot") == []


def test_diff_is_empty() -> None:
    assert MarketListingDiff().is_empty
    assert not MarketListingDiff(new_spots=[MarketListing(name="PURR/USDC", pool="spot")]).is_empty
