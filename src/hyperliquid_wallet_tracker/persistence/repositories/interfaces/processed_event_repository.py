"""Abstract interface for processed event storage (in-memory, SQLite, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent


class IProcessedEventRepository(ABC):
    """Interface for persisting ProcessedEvent (deduplication of handled activity)."""

    @abstractmethod
    async def contains(self, wallet: str, event_id: str) -> bool:
        """Return True if (wallet, event_id) has been processed."""
        ...

    @abstractmethod
    async def add(self, processed_event: ProcessedEvent) -> None:
        """Record that an event has been processed. Idempotent (re-adding same key is no-op)."""
        ...

    async def add_batch(self, processed_events: list[ProcessedEvent]) -> None:
        """Record multiple events. Default impl calls add() for each."""
        for pe in processed_events:
            await self.add(pe)

    @abstractmethod
    async def count_since(self, since: datetime) -> int:
        """Number of events first processed at or after ``since``."""
        ...
