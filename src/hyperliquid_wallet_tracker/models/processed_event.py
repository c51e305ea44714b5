"""ProcessedEvent: write-once fact that an activity has been handled.

Identity is (wallet, event_id). event_id comes from utils.dedupe.event_id()
(e.g. fill:1700000000000:123456). Used to avoid re-notifying across restarts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class ProcessedEvent:
    """Record that a wallet activity has been processed (for deduplication)."""

    wallet: str
    """Tracked wallet address, normalized to lowercase."""
    event_id: str
    """Stable key from utils.dedupe.event_id()."""
    processed_at: datetime
    """When the event was first marked (for statistics/retention)."""

    @classmethod
    def create(
        cls,
        wallet: str,
        event_id: str,
        *,
        processed_at: datetime | None = None,
    ) -> ProcessedEvent:
        """Create a new ProcessedEvent record."""
        wallet = wallet.strip().lower()
        event_id = event_id.strip()
        if not wallet or not event_id:
            raise ValueError("wallet and event_id must be non-empty")
        return cls(
            wallet=wallet,
            event_id=event_id,
            processed_at=processed_at or datetime.now(UTC),
        )
