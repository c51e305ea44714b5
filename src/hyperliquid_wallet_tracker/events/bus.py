"""Application event bus (bubus) carrying market events from detector to notifier."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bubus import EventBus  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.config import Settings

_FALLBACK_NAME = "WalletTracker"


def event_bus_name(app_name: str) -> str:
    """Identifier-safe bus name, e.g. hyperliquid-wallet-tracker -> HyperliquidWalletTracker."""
    parts = [p for p in re.split(r"[^0-9A-Za-z]+", app_name) if p]
    name = "".join(p[:1].upper() + p[1:] for p in parts)
    return name if name.isidentifier() else _FALLBACK_NAME


def build_event_bus(settings: "Settings", *, max_history_size: int = 100) -> EventBus:
    """Create the bus; the container holds it as a singleton."""
    return EventBus(
        name=event_bus_name(settings.app.app_name),
        max_history_size=max_history_size,
        wal_path=None,
    )
