# -*- coding: utf-8 -*-
"""Event bus and event types."""

from hyperliquid_wallet_tracker.events.bus import build_event_bus, event_bus_name
from hyperliquid_wallet_tracker.events.markets import NewMarketsListedEvent

__all__ = ["NewMarketsListedEvent", "build_event_bus", "event_bus_name"]
