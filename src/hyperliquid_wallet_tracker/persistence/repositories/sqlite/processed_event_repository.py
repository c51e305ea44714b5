# -*- coding: utf-8 -*-
"""SQLite processed event repository (table processed_events)."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent
from hyperliquid_wallet_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.sqlite.database import (
    SqliteDatabase,
    to_db_datetime,
)

_INSERT = (
    "INSERT OR IGNORE INTO processed_events (wallet_address, event_id, processed_at) "
    "VALUES (?, ?, ?)"
)


def _row(pe: ProcessedEvent) -> tuple[str, str, str]:
    return (pe.wallet.strip().lower(), pe.event_id.strip(), to_db_datetime(pe.processed_at))


class SqliteProcessedEventRepository(IProcessedEventRepository):
    """SQLite implementation of IProcessedEventRepository. Survives restarts."""

    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    async def contains(self, wallet: str, event_id: str) -> bool:
        def _query(conn: sqlite3.Connection) -> bool:
            row = conn.execute(
                "SELECT 1 FROM processed_events WHERE wallet_address = ? AND event_id = ?",
                (wallet.strip().lower(), event_id.strip()),
            ).fetchone()
            return row is not None

        return await self._db.run(_query)

    async def add(self, processed_event: ProcessedEvent) -> None:
        await self._db.run(lambda conn: conn.execute(_INSERT, _row(processed_event)))

    async def add_batch(self, processed_events: list[ProcessedEvent]) -> None:
        if not processed_events:
            return
        rows = [_row(pe) for pe in processed_events]
        await self._db.run(lambda conn: conn.executemany(_INSERT, rows))

    async def count_since(self, since: datetime) -> int:
        def _query(conn: sqlite3.Connection) -> int:
            row = conn.execute(
                "SELECT COUNT(*) FROM processed_events WHERE processed_at >= ?",
                (to_db_datetime(since),),
            ).fetchone()
            return int(row[0])

        return await self._db.run(_query)
