"""Subscribers and the wallets they track.

Owned by the subscription directory. The monitoring core only reads the set
of distinct active wallet addresses and the subscribers of one address.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class Subscriber:
    """A front-end user that receives notifications (e.g. a Telegram chat)."""

    subscriber_id: str
    username: str | None = None
    active: bool = True
    created_at: datetime | None = None

    @classmethod
    def create(cls, subscriber_id: str, *, username: str | None = None) -> Subscriber:
        subscriber_id = str(subscriber_id).strip()
        if not subscriber_id:
            raise ValueError("subscriber_id must be non-empty")
        return cls(
            subscriber_id=subscriber_id,
            username=username,
            active=True,
            created_at=datetime.now(UTC),
        )


@dataclass(frozen=True, slots=True)
class TrackedWallet:
    """One subscription: a subscriber following a wallet address."""

    subscriber_id: str
    address: str
    """Lowercased 0x address."""
    nickname: str | None = None
    active: bool = True
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Nickname, or a shortened address when no nickname was given."""
        if self.nickname:
            return self.nickname
        return f"{self.address[:6]}...{self.address[-4:]}"


@dataclass(frozen=True, slots=True)
class WalletSubscriber:
    """Recipient resolved for dispatch: who to send to and how they named the wallet."""

    subscriber_id: str
    nickname: str | None = None


@dataclass(frozen=True, slots=True)
class TrackerStatistics:
    """Aggregate usage numbers of the subscription directory."""

    total_subscribers: int
    new_subscribers_today: int
    new_subscribers_this_week: int
    total_tracked_wallets: int
    unique_tracked_wallets: int
    avg_wallets_per_subscriber: float
    events_processed_today: int
