# -*- coding: utf-8 -*-
"""Market-listing diff detector: announce instruments that appear between observations."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.events.markets import NewMarketsListedEvent
from hyperliquid_wallet_tracker.exceptions import HyperliquidAPIError
from hyperliquid_wallet_tracker.models.market import MarketListing, MarketListingDiff

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient


def _has_universe(meta: Any) -> bool:
    return isinstance(meta, dict) and isinstance(meta.get("universe"), list)


def _new_since(current: list[MarketListing], known: set[str]) -> list[MarketListing]:
    fresh: list[MarketListing] = []
    seen: set[str] = set()
    for listing in current:
        if listing.name in known or listing.name in seen:
            continue
        seen.add(listing.name)
        fresh.append(listing)
    return fresh


class MarketListingDetector:
    """Diffs the perpetual and spot universes by name against the previous snapshot.

    The first successful observation after start only sets the baseline.
    A failed or malformed fetch keeps the previous snapshot and reports
    nothing. Non-empty diffs are published as NewMarketsListedEvent.
    """

    def __init__(
        self,
        info_api: "InfoApiClient",
        event_bus: Any,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._info = info_api
        self._event_bus: "EventBus" = event_bus
        self._settings = settings
        self._perps: set[str] | None = None
        self._spots: set[str] | None = None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def has_baseline(self) -> bool:
        return self._perps is not None and self._spots is not None

    async def check(self) -> MarketListingDiff:
        """Observe both universes once and return what is new since the last observation."""
        try:
            perp_meta, spot_meta = await asyncio.gather(self._info.meta(), self._info.spot_meta())
        except HyperliquidAPIError as e:
            self._logger.warning(
                "market_listing_fetch_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return MarketListingDiff()
        if not (_has_universe(perp_meta) and _has_universe(spot_meta)):
            self._logger.warning(
                "market_listing_fetch_incomplete",
                market_perp_meta_missing=not _has_universe(perp_meta),
                market_spot_meta_missing=not _has_universe(spot_meta),
            )
            return MarketListingDiff()

        perps = MarketListing.from_universe(dict(perp_meta or {}), "perp")
        spots = MarketListing.from_universe(dict(spot_meta or {}), "spot")

        if self._perps is None or self._spots is None:
            self._perps = {m.name for m in perps}
            self._spots = {m.name for m in spots}
            self._logger.info(
                "market_listing_baseline_set",
                market_perp_count=len(self._perps),
                market_spot_count=len(self._spots),
            )
            return MarketListingDiff()

        diff = MarketListingDiff(
            new_perps=_new_since(perps, self._perps),
            new_spots=_new_since(spots, self._spots),
        )
        self._perps = {m.name for m in perps}
        self._spots = {m.name for m in spots}

        if not diff.is_empty:
            self._logger.info(
                "market_listing_new_markets",
                market_new_perps=[m.name for m in diff.new_perps],
                market_new_spots=[m.name for m in diff.new_spots],
            )
            self._event_bus.dispatch(NewMarketsListedEvent.from_diff(diff))
        return diff

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Call check() every ``markets.poll_seconds`` until shutdown_event is set."""
        poll_seconds = self._settings.markets.poll_seconds
        self._logger.info("market_listing_detector_started", market_poll_seconds=poll_seconds)
        try:
            while not shutdown_event.is_set():
                try:
                    await self.check()
                except Exception as e:
                    self._logger.error(
                        "market_listing_check_failed",
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=poll_seconds)
                except TimeoutError:
                    pass
        finally:
            self._logger.info("market_listing_detector_stopped")
