# -*- coding: utf-8 -*-
"""In-memory processed event repository (keyed by (wallet, event_id))."""

from __future__ import annotations

from datetime import datetime

from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent
from hyperliquid_wallet_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)


def _key(wallet: str, event_id: str) -> tuple[str, str]:
    """Normalize key for storage."""
    return (wallet.strip().lower(), event_id.strip())


class InMemoryProcessedEventRepository(IProcessedEventRepository):
    """In-memory implementation of IProcessedEventRepository."""

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[tuple[str, str], ProcessedEvent] = {}

    async def contains(self, wallet: str, event_id: str) -> bool:
        """Return True if (wallet, event_id) has been processed."""
        return _key(wallet, event_id) in self._store

    async def add(self, processed_event: ProcessedEvent) -> None:
        """Record that an event has been processed. Idempotent."""
        k = _key(processed_event.wallet, processed_event.event_id)
        if k not in self._store:
            self._store[k] = processed_event

    async def add_batch(self, processed_events: list[ProcessedEvent]) -> None:
        """Record multiple events in one pass."""
        for pe in processed_events:
            self._store.setdefault(_key(pe.wallet, pe.event_id), pe)

    async def count_since(self, since: datetime) -> int:
        return sum(1 for pe in self._store.values() if pe.processed_at >= since)
