# -*- coding: utf-8 -*-
"""SQLite subscription directory (tables subscribers, tracked_wallets)."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime, timedelta

from hyperliquid_wallet_tracker.models.subscription import (
    Subscriber,
    TrackedWallet,
    TrackerStatistics,
    WalletSubscriber,
)
from hyperliquid_wallet_tracker.persistence.repositories.interfaces.subscription_repository import (
    ISubscriptionRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.sqlite.database import (
    SqliteDatabase,
    from_db_datetime,
    to_db_datetime,
)


def _subscriber(row: sqlite3.Row) -> Subscriber:
    return Subscriber(
        subscriber_id=row["subscriber_id"],
        username=row["username"],
        active=bool(row["is_active"]),
        created_at=from_db_datetime(row["created_at"]),
    )


def _wallet(row: sqlite3.Row) -> TrackedWallet:
    return TrackedWallet(
        subscriber_id=row["subscriber_id"],
        address=row["wallet_address"],
        nickname=row["nickname"],
        active=bool(row["is_active"]),
        created_at=from_db_datetime(row["created_at"]),
    )


class SqliteSubscriptionRepository(ISubscriptionRepository):
    """SQLite implementation of ISubscriptionRepository."""

    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    async def add_subscriber(self, subscriber: Subscriber) -> None:
        created_at = subscriber.created_at or datetime.now(UTC)
        await self._db.run(
            lambda conn: conn.execute(
                "INSERT OR IGNORE INTO subscribers (subscriber_id, username, is_active, created_at) "
                "VALUES (?, ?, ?, ?)",
                (
                    subscriber.subscriber_id,
                    subscriber.username,
                    int(subscriber.active),
                    to_db_datetime(created_at),
                ),
            )
        )

    async def get_subscriber(self, subscriber_id: str) -> Subscriber | None:
        def _query(conn: sqlite3.Connection) -> Subscriber | None:
            row = conn.execute(
                "SELECT * FROM subscribers WHERE subscriber_id = ?", (subscriber_id,)
            ).fetchone()
            return _subscriber(row) if row is not None else None

        return await self._db.run(_query)

    async def list_active_subscribers(self) -> list[Subscriber]:
        def _query(conn: sqlite3.Connection) -> list[Subscriber]:
            rows = conn.execute(
                "SELECT * FROM subscribers WHERE is_active = 1 ORDER BY id"
            ).fetchall()
            return [_subscriber(r) for r in rows]

        return await self._db.run(_query)

    async def add_wallet(self, wallet: TrackedWallet) -> TrackedWallet:
        address = wallet.address.strip().lower()
        created_at = wallet.created_at or datetime.now(UTC)

        def _upsert(conn: sqlite3.Connection) -> None:
            conn.execute(
                "INSERT INTO tracked_wallets "
                "(subscriber_id, wallet_address, nickname, is_active, created_at) "
                "VALUES (?, ?, ?, 1, ?) "
                "ON CONFLICT(subscriber_id, wallet_address) DO UPDATE SET "
                "nickname = excluded.nickname, is_active = 1, created_at = excluded.created_at",
                (wallet.subscriber_id, address, wallet.nickname, to_db_datetime(created_at)),
            )

        await self._db.run(_upsert)
        return TrackedWallet(
            subscriber_id=wallet.subscriber_id,
            address=address,
            nickname=wallet.nickname,
            active=True,
            created_at=created_at,
        )

    async def deactivate_wallet(self, subscriber_id: str, address: str) -> bool:
        def _update(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute(
                "UPDATE tracked_wallets SET is_active = 0 "
                "WHERE subscriber_id = ? AND wallet_address = ? AND is_active = 1",
                (subscriber_id, address.strip().lower()),
            )
            return cursor.rowcount > 0

        return await self._db.run(_update)

    async def count_active_wallets(self, subscriber_id: str) -> int:
        def _query(conn: sqlite3.Connection) -> int:
            row = conn.execute(
                "SELECT COUNT(*) FROM tracked_wallets WHERE subscriber_id = ? AND is_active = 1",
                (subscriber_id,),
            ).fetchone()
            return int(row[0])

        return await self._db.run(_query)

    async def list_wallets(self, subscriber_id: str) -> list[TrackedWallet]:
        def _query(conn: sqlite3.Connection) -> list[TrackedWallet]:
            rows = conn.execute(
                "SELECT * FROM tracked_wallets WHERE subscriber_id = ? AND is_active = 1 "
                "ORDER BY created_at, id",
                (subscriber_id,),
            ).fetchall()
            return [_wallet(r) for r in rows]

        return await self._db.run(_query)

    async def list_active_wallet_addresses(self) -> list[str]:
        def _query(conn: sqlite3.Connection) -> list[str]:
            rows = conn.execute(
                "SELECT DISTINCT wallet_address FROM tracked_wallets WHERE is_active = 1"
            ).fetchall()
            return [r["wallet_address"] for r in rows]

        return await self._db.run(_query)

    async def subscribers_of(self, address: str) -> list[WalletSubscriber]:
        def _query(conn: sqlite3.Connection) -> list[WalletSubscriber]:
            rows = conn.execute(
                "SELECT s.subscriber_id, tw.nickname "
                "FROM subscribers s JOIN tracked_wallets tw ON s.subscriber_id = tw.subscriber_id "
                "WHERE tw.wallet_address = ? AND tw.is_active = 1 AND s.is_active = 1 "
                "ORDER BY tw.id",
                (address.strip().lower(),),
            ).fetchall()
            return [
                WalletSubscriber(subscriber_id=r["subscriber_id"], nickname=r["nickname"])
                for r in rows
            ]

        return await self._db.run(_query)

    async def statistics(
        self,
        *,
        now: datetime | None = None,
        events_processed_today: int = 0,
    ) -> TrackerStatistics:
        now = now or datetime.now(UTC)
        day_ago = to_db_datetime(now - timedelta(days=1))
        week_ago = to_db_datetime(now - timedelta(days=7))

        def _query(conn: sqlite3.Connection) -> TrackerStatistics:
            subs = conn.execute(
                "SELECT COUNT(*), "
                "SUM(CASE WHEN created_at >= ? THEN 1 ELSE 0 END), "
                "SUM(CASE WHEN created_at >= ? THEN 1 ELSE 0 END) "
                "FROM subscribers WHERE is_active = 1",
                (day_ago, week_ago),
            ).fetchone()
            wallets = conn.execute(
                "SELECT COUNT(*), COUNT(DISTINCT wallet_address), COUNT(DISTINCT subscriber_id) "
                "FROM tracked_wallets WHERE is_active = 1"
            ).fetchone()
            total_wallets, unique_wallets, owners = int(wallets[0]), int(wallets[1]), int(wallets[2])
            return TrackerStatistics(
                total_subscribers=int(subs[0]),
                new_subscribers_today=int(subs[1] or 0),
                new_subscribers_this_week=int(subs[2] or 0),
                total_tracked_wallets=total_wallets,
                unique_tracked_wallets=unique_wallets,
                avg_wallets_per_subscriber=round(total_wallets / owners, 2) if owners else 0.0,
                events_processed_today=events_processed_today,
            )

        return await self._db.run(_query)
